"""Cortex Relay.

This package relays natural-language browsing goals to a browser extension.
A goal such as ``"go to github.com and search for pydantic"`` is turned into an
ordered plan of browser commands, and the commands are handed to the extension
one at a time over a websocket. The extension reports back after each command
and the relay advances the plan.

High-level architecture
-----------------------

The codebase is organized around two concerns:

- **Planning**: turning goal text into a list of ``Command`` objects. A
  keyword-driven rule planner always works; an optional LLM-backed planner is
  consulted for ambiguous goals and falls back to the rules on any failure.
- **Sequencing**: tracking the execution of one plan across asynchronous
  round-trips with the extension. The sequencer issues one command, waits for
  a ``StepOutcome`` and then issues the next one or finishes the task.

Core subpackages
----------------

- ``cortex_relay.agent_core``:

  - Command/task schemas.
  - Rule-based and LLM-based planners.
  - The task sequencer and its repository interface.

- ``cortex_relay.server``:

  - FastAPI application exposing the websocket endpoint and a small REST view
    of in-flight tasks.

Typical workflow
----------------

1. The extension connects to ``/ws`` and sends ``HANDSHAKE``.
2. The user submits ``EXECUTE_TASK`` with a goal.
3. The relay plans the goal and sends ``COMMAND`` (announcing the whole plan
   with ``COMMAND_SEQUENCE`` first when it has more than one step).
4. The extension executes the command and replies with ``COMMAND_COMPLETE``.
5. Steps 3-4 repeat until the relay sends ``TASK_COMPLETE``.
"""
