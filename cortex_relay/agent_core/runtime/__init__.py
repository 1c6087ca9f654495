"""Event-driven execution runtime for planned tasks.

 The runtime takes a plan (an ordered list of browser commands produced by the
 planning subsystem) and walks it one step at a time:

 - command #0 is sent as soon as the task is registered,
 - each ``COMMAND_COMPLETE`` outcome advances the cursor by exactly one,
 - the task is deregistered once it completes, fails, is cancelled or expires.

 The main entry point is ``TaskSequencer``.

 Storage and planning are injected via ``SequencerDeps``; outbound messages go
 through a ``MessageChannel`` owned by the caller.
 """

from .models import MessageChannel, SequencerDeps, SequencerPolicy
from .sequencer import TaskSequencer, generate_task_id

__all__ = [
    "MessageChannel",
    "SequencerDeps",
    "SequencerPolicy",
    "TaskSequencer",
    "generate_task_id",
]
