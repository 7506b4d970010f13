from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# COMMANDS
# ============================================================================
EVENT_CELL_SELECT = "cell_select"          # payload: x=int, y=int
EVENT_ROUND_RESTART = "round_restart"      # payload: reason=str|None


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_SELECTION_IGNORED = "selection_ignored"  # payload: x, y, reason=str
EVENT_MATCH_FOUND = "match_found"              # payload: origin=(x,y), positions=[(x,y),...], size=int
EVENT_MATCH_CLEARED = "match_cleared"          # payload: positions=[(x,y),...], types=[(x,y,type_name),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"      # payload: moves=[{'from','to','type_name'}], columns=int
EVENT_REFILL_COMPLETED = "refill_completed"    # payload: new_tiles=[{'x','y','new_type'}]
EVENT_BOARD_FILLED = "board_filled"            # payload: reason=str, width=int, height=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"    # payload: reason=str, placements=list[{x, y, new_type}]


# ============================================================================
# ROUND
# ============================================================================
EVENT_ROUND_STARTED = "round_started"          # payload: target_score=int, max_moves=int
EVENT_SCORE_CHANGED = "score_changed"          # payload: score=int, delta=int, moves_remaining=int
EVENT_ROUND_OUTCOME = "round_outcome"          # payload: outcome=str, score=int, moves_remaining=int
EVENT_TURN_RESOLVED = "turn_resolved"          # payload: TurnResult.to_payload()
