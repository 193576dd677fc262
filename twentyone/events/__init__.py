"""
Event system for the twentyone engine.

This package provides the event bus that round transitions report to.
"""

from twentyone.events.emitter import EventEmitter, EventBus, EngineEventType

__all__ = ["EventEmitter", "EventBus", "EngineEventType"]
