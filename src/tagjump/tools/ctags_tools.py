"""Tag generator adapters."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationArgs:
    languages: tuple[str, ...] = ("all",)
    exclude_patterns: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        languages: Optional[Iterable[str]] = None,
        exclude_patterns: Optional[Iterable[str]] = None,
    ) -> "GenerationArgs":
        # de-dup while preserving order
        langs = tuple(dict.fromkeys(lang.strip() for lang in languages or [] if lang.strip()))
        excludes = tuple(p for p in exclude_patterns or [] if p)
        return cls(languages=langs or ("all",), exclude_patterns=excludes)

    def to_argv(self) -> list[str]:
        argv = ["--languages=" + ",".join(self.languages)]
        argv.extend(f"--exclude={pattern}" for pattern in self.exclude_patterns)
        return argv

    def describe(self) -> str:
        return " ".join(self.to_argv())


@dataclass
class GenerationResult:
    success: bool
    log: str
    returncode: Optional[int] = None
    cancelled: bool = False
    timed_out: bool = False


class TagGenerator:
    def generate(
        self,
        root: Path,
        tags_path: Path,
        args: GenerationArgs,
        *,
        cancel: Optional[threading.Event] = None,
        timeout_sec: Optional[float] = None,
    ) -> GenerationResult:
        raise NotImplementedError


class CtagsGenerator(TagGenerator):
    """Run the ctags executable inside the workspace root."""

    def __init__(
        self,
        binary: str = "ctags",
        extra_args: Optional[list[str]] = None,
        poll_interval: float = 0.1,
    ):
        self.binary = binary
        self.extra_args = list(extra_args) if extra_args is not None else ["-R"]
        self.poll_interval = poll_interval

    def command(self, tags_path: Path, args: GenerationArgs) -> list[str]:
        # ctags runs with cwd=root, so a relative -f would land under the root twice.
        out = str(Path(tags_path).resolve())
        return [self.binary, *self.extra_args, "-f", out, *args.to_argv(), "."]

    def generate(
        self,
        root: Path,
        tags_path: Path,
        args: GenerationArgs,
        *,
        cancel: Optional[threading.Event] = None,
        timeout_sec: Optional[float] = None,
    ) -> GenerationResult:
        cmd = self.command(tags_path, args)
        logger.info("ctags start: cmd=%s cwd=%s", cmd, root)
        try:
            proc = subprocess.Popen(
                cmd,
                cwd=root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            logger.error("ctags spawn failed: %s", exc)
            return GenerationResult(success=False, log=f"spawn failed: {exc}")

        deadline = time.monotonic() + timeout_sec if timeout_sec else None
        while True:
            try:
                out, err = proc.communicate(timeout=self.poll_interval)
                break
            except subprocess.TimeoutExpired:
                if cancel is not None and cancel.is_set():
                    log = self._kill(proc)
                    logger.info("ctags cancelled")
                    return GenerationResult(
                        success=False, log=log, returncode=proc.returncode, cancelled=True
                    )
                if deadline is not None and time.monotonic() >= deadline:
                    log = self._kill(proc)
                    logger.warning("ctags timed out after %.1fs", timeout_sec)
                    return GenerationResult(
                        success=False, log=log, returncode=proc.returncode, timed_out=True
                    )

        success = proc.returncode == 0
        logger.info("ctags finished: returncode=%s", proc.returncode)
        return GenerationResult(success=success, log=out + "\n" + err, returncode=proc.returncode)

    @staticmethod
    def _kill(proc: subprocess.Popen) -> str:
        proc.kill()
        out, err = proc.communicate()
        return (out or "") + "\n" + (err or "")
