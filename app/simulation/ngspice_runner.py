"""
simulation/ngspice_runner.py

Handles execution of ngspice in batch mode against a generated deck.

Every run gets its own temporary directory which is removed on every exit
path. Runs are bounded by a timeout and can be cancelled through a
``threading.Event``.
"""

import logging
import os
import platform
import shutil
import subprocess
import tempfile
import time
from typing import Optional

logger = logging.getLogger(__name__)

DECK_FILENAME = "circuit.cir"
POLL_INTERVAL = 0.1


class NgspiceRunner:
    """Runs ngspice simulations and captures their text output."""

    def __init__(self, ngspice_cmd: Optional[str] = None, timeout: float = 60.0):
        self.ngspice_cmd = ngspice_cmd
        self.timeout = timeout

    def find_ngspice(self):
        """Find ngspice executable on the system"""
        if self.ngspice_cmd and os.path.exists(self.ngspice_cmd):
            return self.ngspice_cmd

        # Try PATH lookup first (works cross-platform)
        which_result = shutil.which("ngspice")
        if which_result:
            self.ngspice_cmd = which_result
            return which_result

        system = platform.system()

        # Fallback: check common installation paths
        if system == "Windows":
            possible_paths = [
                r"C:\Program Files\Spice64\bin\ngspice.exe",
                r"C:\Program Files\ngspice\bin\ngspice.exe",
                r"C:\ngspice\bin\ngspice.exe",
            ]
        elif system == "Linux":
            possible_paths = [
                "/usr/bin/ngspice",
                "/usr/local/bin/ngspice",
            ]
        elif system == "Darwin":  # macOS
            possible_paths = [
                "/usr/local/bin/ngspice",
                "/opt/homebrew/bin/ngspice",
            ]
        else:
            possible_paths = []

        for cmd in possible_paths:
            if os.path.exists(cmd):
                self.ngspice_cmd = cmd
                return cmd

        self.ngspice_cmd = None
        return None

    def run_simulation(self, deck_text: str, cancel_event=None):
        """
        Run ngspice against ``deck_text``.

        Returns:
            tuple: (success: bool, stdout: str, error: str). ``stdout`` is the
            combined engine output; ``error`` is empty on success.
        """
        if self.find_ngspice() is None:
            return False, "", "ngspice executable not found"

        with tempfile.TemporaryDirectory(prefix="ngspice-") as work_dir:
            deck_path = os.path.join(work_dir, DECK_FILENAME)
            try:
                with open(deck_path, "w") as f:
                    f.write(deck_text)
            except OSError as e:
                return False, "", f"Failed to write deck: {e}"

            try:
                proc = subprocess.Popen(
                    [self.ngspice_cmd, "-b", DECK_FILENAME],
                    cwd=work_dir,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                )
            except OSError as e:
                return False, "", f"Failed to start ngspice: {e}"

            return self._wait(proc, cancel_event)

    def _wait(self, proc, cancel_event):
        """Wait for ``proc`` while honouring the timeout and cancellation."""
        deadline = time.monotonic() + self.timeout
        while True:
            if cancel_event is not None and cancel_event.is_set():
                self._terminate(proc)
                logger.info("Simulation cancelled")
                return False, "", "Simulation cancelled"

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._terminate(proc)
                return False, "", f"Simulation timed out (>{self.timeout:g} seconds)"

            try:
                stdout, _ = proc.communicate(timeout=min(POLL_INTERVAL, remaining))
                break
            except subprocess.TimeoutExpired:
                continue

        stdout = stdout or ""
        if proc.returncode != 0:
            logger.warning("ngspice exited with code %s", proc.returncode)
            return False, stdout, f"ngspice exited with code {proc.returncode}"
        return True, stdout, ""

    @staticmethod
    def _terminate(proc) -> None:
        proc.kill()
        try:
            proc.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            logger.error("ngspice process %s did not exit after kill", proc.pid)
