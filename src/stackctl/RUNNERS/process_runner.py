# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Execution of component processes with log redirection and pid tracking.
"""
import os
import signal
import subprocess
import threading
import time
from typing import Dict, List, Optional

class ProcessRunner:
    """
    Manages the process of a single component.

    The pid is recorded under ``<workdir>/pids`` so a later invocation can
    stop a process it did not start.
    """
    def __init__(self, name: str, workdir: str):
        """
        Initializes the process runner.

        Args:
            name (str): Name of the component.
            workdir (str): Cluster working directory holding logs and pid files.
        """
        self.name = name
        self.log_file = os.path.join(workdir, "logs", f"{name}.log")
        self.pid_file = os.path.join(workdir, "pids", f"{name}.pid")
        self.process: Optional[subprocess.Popen] = None

    def start(self,
              command: List[str],
              env: Optional[Dict[str, str]] = None,
              working_dir: Optional[str] = None):
        """
        Starts the process with stdout and stderr appended to the log file.

        Args:
            command (List[str]): Command and arguments to execute.
            env (Optional[Dict[str, str]]): Environment for the process.
            working_dir (Optional[str]): Directory to start the process in.
        """
        if working_dir:
            os.makedirs(working_dir, exist_ok=True)
        os.makedirs(os.path.dirname(self.log_file), exist_ok=True)
        os.makedirs(os.path.dirname(self.pid_file), exist_ok=True)

        print(f"[{self.name}] Starting command: {' '.join(command)}")
        with open(self.log_file, "a") as log_handle:
            self.process = subprocess.Popen(
                command,
                env=env,
                cwd=working_dir,
                stdout=log_handle,
                stderr=subprocess.STDOUT,
                start_new_session=True,
                shell=False
            )

        with open(self.pid_file, "w") as f:
            f.write(str(self.process.pid))

    def stop(self, timeout: float = 10, cancel_event: Optional[threading.Event] = None):
        """
        Stops the process with SIGTERM, then SIGKILL once ``timeout`` expires.

        Args:
            timeout (float): Seconds to wait for termination before killing.
            cancel_event (Optional[threading.Event]): Stops waiting early when set.
        """
        pid = self.pid()
        if pid is None:
            print(f"[{self.name}] Not running.")
            return

        print(f"[{self.name}] Stopping process {pid}...")
        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            self._remove_pid_file()
            return

        deadline = time.monotonic() + timeout
        while self.is_running() and time.monotonic() < deadline:
            if cancel_event is not None and cancel_event.is_set():
                return
            time.sleep(0.1)

        if self.is_running():
            print(f"[{self.name}] Process did not terminate, killing...")
            try:
                os.kill(pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            if self.process is not None:
                self.process.wait()
        self._remove_pid_file()

    def pid(self) -> Optional[int]:
        """
        Returns:
            Optional[int]: The recorded pid, or None if there is none.
        """
        if self.process is not None:
            return self.process.pid
        try:
            with open(self.pid_file, "r") as f:
                return int(f.read().strip())
        except (OSError, ValueError):
            return None

    def is_running(self) -> bool:
        """
        Checks if the component process is alive.

        Returns:
            bool: True if running, False otherwise.
        """
        if self.process is not None:
            return self.process.poll() is None
        pid = self.pid()
        if pid is None:
            return False
        try:
            # Reap it if it is an exited child of this process
            if os.waitpid(pid, os.WNOHANG)[0] == pid:
                return False
        except ChildProcessError:
            pass
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            return True
        return True

    def get_exit_code(self) -> Optional[int]:
        """
        Returns:
            Optional[int]: Exit code if a process started here has finished, None otherwise.
        """
        if self.process is not None:
            return self.process.poll()
        return None

    def status(self) -> str:
        """
        Returns:
            str: 'running', 'stopped' or 'exited(<code>)'.
        """
        if self.is_running():
            return "running"
        exit_code = self.get_exit_code()
        if exit_code is None:
            return "stopped"
        return f"exited({exit_code})"

    def _remove_pid_file(self):
        if os.path.exists(self.pid_file):
            os.remove(self.pid_file)
