from .liveness import LivenessTracker as LivenessTracker
from .models import (
    ServerStatusRecord as ServerStatusRecord,
    StatusChange as StatusChange,
    StatusSnapshot as StatusSnapshot,
)
