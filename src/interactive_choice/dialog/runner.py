"""Dialog subprocess lifecycle: spawn, wait for exit or timeout, collect stdout."""

from __future__ import annotations

import asyncio
import subprocess
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from interactive_choice.dialog.types import (
    DialogExitedNonZero,
    DialogLaunchFailed,
    DialogOutcome,
    DialogState,
    DialogSucceeded,
    DialogTimedOut,
    InputDocument,
)

DialogEventSink = Callable[[str, Dict[str, Any]], None]

INPUT_FLAG = "--input"
_READ_CHUNK_BYTES = 4096


@dataclass
class DialogCommand:
    command: str
    args: List[str] = field(default_factory=list)

    def argv(self, document: InputDocument) -> List[str]:
        return [self.command] + list(self.args) + [INPUT_FLAG, document.serialize()]


class DialogInvocation:
    """One dialog process run. Resolves to exactly one ``DialogOutcome``."""

    def __init__(
        self,
        command: DialogCommand,
        document: InputDocument,
        timeout_sec: float,
        event_sink: Optional[DialogEventSink] = None,
    ) -> None:
        self._command = command
        self._document = document
        self._timeout_sec = float(timeout_sec)
        self._event_sink = event_sink
        self._chunks: List[bytes] = []
        self._outcome: Optional[DialogOutcome] = None
        self._process: Optional[asyncio.subprocess.Process] = None
        self.state = DialogState.IDLE

    @property
    def outcome(self) -> Optional[DialogOutcome]:
        return self._outcome

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    @property
    def returncode(self) -> Optional[int]:
        if self._process is None:
            return None
        return self._process.returncode

    @property
    def stdout_text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", errors="replace")

    def settle(self, outcome: DialogOutcome) -> bool:
        """Record ``outcome`` unless one was already recorded."""
        if self._outcome is not None:
            return False
        self._outcome = outcome
        if isinstance(outcome, DialogTimedOut):
            self.state = DialogState.TIMED_OUT
        elif isinstance(outcome, DialogLaunchFailed):
            self.state = DialogState.LAUNCH_FAILED
        else:
            self.state = DialogState.COMPLETED
        return True

    def handle_exit(self, code: int) -> bool:
        if code == 0:
            settled = self.settle(DialogSucceeded(raw_stdout=self.stdout_text))
        else:
            settled = self.settle(DialogExitedNonZero(code=int(code)))
        if settled:
            self._emit(
                "dialog.completed" if code == 0 else "dialog.exited_nonzero",
                {"exit_code": int(code), "stdout_bytes": sum(len(chunk) for chunk in self._chunks)},
            )
        return settled

    def handle_timeout(self) -> bool:
        settled = self.settle(DialogTimedOut(timeout_sec=self._timeout_sec))
        if settled:
            self._emit("dialog.timed_out", {"timeout_sec": self._timeout_sec})
        return settled

    def handle_launch_error(self, exc: OSError) -> bool:
        settled = self.settle(DialogLaunchFailed(error_message=str(exc)))
        if settled:
            self._emit(
                "dialog.launch_failed",
                {"command": self._command.command, "error": str(exc)},
            )
        return settled

    async def run(self) -> DialogOutcome:
        if self.state is not DialogState.IDLE:
            raise RuntimeError("dialog invocation already started")

        self.state = DialogState.SPAWNING
        argv = self._command.argv(self._document)
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=None,
            )
        except OSError as exc:
            self.handle_launch_error(exc)
            return self._require_outcome()

        self._process = process
        self.state = DialogState.RUNNING
        self._emit(
            "dialog.spawned",
            {
                "command": self._command.command,
                "pid": process.pid,
                "choices": len(self._document.choices),
                "timeout_sec": self._timeout_sec,
            },
        )

        try:
            code = await asyncio.wait_for(self._collect(process), timeout=self._timeout_sec)
        except asyncio.TimeoutError:
            self.handle_timeout()
            await self._kill(process)
            return self._require_outcome()
        except BaseException:
            # Cancelled by the caller: kill and reap without settling an outcome.
            self._terminate(process)
            await asyncio.shield(process.wait())
            raise

        self.handle_exit(code)
        return self._require_outcome()

    async def _collect(self, process: asyncio.subprocess.Process) -> int:
        stream = process.stdout
        if stream is not None:
            while True:
                chunk = await stream.read(_READ_CHUNK_BYTES)
                if not chunk:
                    break
                self._chunks.append(chunk)
        return await process.wait()

    @staticmethod
    def _terminate(process: asyncio.subprocess.Process) -> None:
        if process.returncode is not None:
            return
        try:
            process.kill()
        except ProcessLookupError:
            pass

    async def _kill(self, process: asyncio.subprocess.Process) -> None:
        self._terminate(process)
        await process.wait()

    def _require_outcome(self) -> DialogOutcome:
        outcome = self._outcome
        if outcome is None:
            raise RuntimeError("dialog invocation finished without an outcome")
        return outcome

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        self._event_sink(event_type, payload)


class DialogRunner:
    """Launch dialogs for one configured command."""

    def __init__(
        self,
        command: DialogCommand,
        event_sink: Optional[DialogEventSink] = None,
    ) -> None:
        self._command = command
        self._event_sink = event_sink

    @property
    def command(self) -> DialogCommand:
        return self._command

    def invocation(self, document: InputDocument, timeout_sec: float) -> DialogInvocation:
        return DialogInvocation(
            command=self._command,
            document=document,
            timeout_sec=timeout_sec,
            event_sink=self._event_sink,
        )

    async def run(self, document: InputDocument, timeout_sec: float) -> DialogOutcome:
        return await self.invocation(document, timeout_sec).run()
