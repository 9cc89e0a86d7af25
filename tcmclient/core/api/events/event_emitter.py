"""Event emitter using Observer Pattern."""
from typing import Dict, List, Callable, Optional


class EventEmitter:
    """Event emitter using Observer Pattern."""
    
    def __init__(self):
        self._events: Dict[str, List[Callable]] = {}
    
    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        """Registers an event handler."""
        self._events.setdefault(event, []).append(callback)
        return self
    
    def emit(self, event: str, *args, **kwargs) -> int:
        """Emits an event. Returns the number of handlers called."""
        callbacks = list(self._events.get(event, ()))
        for callback in callbacks:
            callback(*args, **kwargs)
        return len(callbacks)
    
    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Removes one handler, or every handler of the event."""
        if event not in self._events:
            return self
        
        if callback is None:
            del self._events[event]
        else:
            self._events[event] = [cb for cb in self._events[event] if cb != callback]
        
        return self
    
    def listeners(self, event: str) -> List[Callable]:
        """Returns the handlers registered for an event."""
        return list(self._events.get(event, ()))
