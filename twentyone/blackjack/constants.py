"""Blackjack-specific constants."""

# Best possible hand; anything above it is bust
BLACKJACK = 21

# Dealer draws below this score unless the table rules say otherwise
DEFAULT_STAND_THRESHOLD = 17
