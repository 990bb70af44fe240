# pingfeed/runner/fping.py
import shlex
import shutil
import subprocess
from typing import Iterator, Optional, Sequence

from loguru import logger

from pingfeed.config import FPingSettings
from pingfeed.errors import FPingError, FPingNotFoundError, FPingStartError


class FPingRunner:
    """
    Starts fping in loop mode and exposes its stderr, which is where the
    periodic "[HH:MM:SS]" + per-host summary blocks go. stdout (one line per
    ping) is discarded so it can never fill up and stall the process.
    """

    def __init__(self,
                 settings: FPingSettings,
                 hosts: Sequence[str],
                 grace_s: float = 5.0):
        self.settings = settings
        self.hosts = list(hosts)
        self.grace_s = grace_s
        self.proc: Optional[subprocess.Popen] = None

    def build_flags(self) -> dict[str, str]:
        s = self.settings
        flags = {
            "-B": s.backoff,
            "-r": s.retries,
            "-O": s.tos,
            "-Q": s.summary,
            "-p": s.period,
            "-l": "",  # loop
            "-D": "",  # timestamp
        }
        if s.show_address:
            flags["-n"] = ""  # show DNS names
            flags["-A"] = ""  # display address
        if s.dualstack:
            flags["-m"] = ""  # send to all addresses
        # overrides keep their position, new flags go at the end
        flags.update(s.custom)
        return flags

    def build_args(self) -> list[str]:
        args = []
        for flag, value in self.build_flags().items():
            args.append(flag)
            if value != "":
                args.append(value)
        args.extend(self.hosts)
        return args

    def resolve_binary(self) -> str:
        path = shutil.which(self.settings.binary)
        if path is None:
            raise FPingNotFoundError(f"{self.settings.binary!r} not found on PATH")
        return path

    def start(self):
        cmd = [self.resolve_binary(), *self.build_args()]
        logger.info("Launching fping: {}", shlex.join(cmd))
        try:
            self.proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                bufsize=1,
            )
        except OSError as e:
            raise FPingStartError(f"unable to start {cmd[0]}: {e}") from e

        if self.proc.stderr is None:
            self.close()
            raise FPingStartError("fping stderr is not available")
        return self.proc.stderr

    def lines(self) -> Iterator[str]:
        if self.proc is None or self.proc.stderr is None:
            raise FPingError("fping has not been started")
        for line in self.proc.stderr:
            yield line.rstrip("\r\n")

    def stop(self) -> None:
        """Ask fping to exit; its stream then ends and the reader unblocks."""
        if self.proc is not None and self.proc.poll() is None:
            self.proc.terminate()

    def wait(self) -> int:
        if self.proc is None:
            raise FPingError("fping has not been started")
        code = self.proc.wait()
        logger.info("fping exited with status {}", code)
        return code

    def close(self) -> None:
        if self.proc is None:
            return
        self.stop()
        try:
            self.proc.wait(timeout=self.grace_s)
        except subprocess.TimeoutExpired:
            logger.warning("fping did not exit after {}s, killing it", self.grace_s)
            self.proc.kill()
            self.proc.wait()
        if self.proc.stderr is not None:
            self.proc.stderr.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
