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
Concurrent execution of an action across dependency-grouped components.

Actions are called as ``action(cancel_event, component)``. ``cancel_event``
is a :class:`threading.Event` shared by every action running in the same
batch; it is set once any of them fails. Cancellation is cooperative: a
running action is never interrupted, it is expected to check the event
and return early.
"""
import threading
from enum import Enum
from typing import Callable, List, Optional, Sequence
from ..MODELS.component import Component

Action = Callable[[threading.Event, Component], None]

class ExecutionMode(str, Enum):
    """
    How :func:`foreach_components` drives the action.
    """
    NORMAL = "normal"
    DRY_RUN = "dry-run"  # strictly sequential, for previewing the plan

class WorkerGroup:
    """
    Runs callables on their own threads and keeps the first failure.

    The first exception raised by any callable sets :attr:`cancel_event`;
    :meth:`wait` joins every thread and re-raises that exception as is.
    """
    def __init__(self):
        self.cancel_event = threading.Event()
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._error: Optional[BaseException] = None

    def go(self, fn: Callable, *args):
        """
        Starts ``fn(*args)`` on a new thread.

        :param fn: The callable to run.
        :param args: Positional arguments for the callable.
        """
        thread = threading.Thread(target=self._run, args=(fn, args), daemon=True)
        self._threads.append(thread)
        thread.start()

    def _run(self, fn: Callable, args: tuple):
        try:
            fn(*args)
        except BaseException as e:
            with self._lock:
                if self._error is None:
                    self._error = e
                    self.cancel_event.set()

    def _join(self):
        for thread in self._threads:
            thread.join()

    def wait(self):
        """
        Blocks until every started callable has returned.

        :raises BaseException: The first exception raised by any callable.
        """
        self._join()
        self.cancel_event.set()
        if self._error is not None:
            raise self._error

    def __enter__(self) -> "WorkerGroup":
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.cancel_event.set()
            self._join()
            return False
        self.wait()
        return False

def foreach_components(groups: Sequence[Sequence[Component]],
                       action: Action,
                       reverse: bool = False,
                       order: bool = True,
                       mode: ExecutionMode = ExecutionMode.NORMAL):
    """
    Calls ``action`` for every component in ``groups``.

    In dry-run mode every component is visited one after another, group by
    group, in declaration order. With ``order`` set, groups run in sequence:
    a single-member group runs inline, larger groups run concurrently and
    the next group only starts once the whole group succeeded. Without
    ``order`` every component starts at once and the grouping is ignored,
    which is only correct for actions that do not depend on startup order.

    :param groups: Components grouped by dependency, earliest first.
    :param action: Callable invoked as ``action(cancel_event, component)``.
    :param reverse: Walk the groups back to front, e.g. for teardown.
    :param order: Honor the group sequence.
    :param mode: Normal or dry-run execution.
    :raises Exception: The first exception raised by ``action``, unwrapped.
    """
    if reverse:
        groups = list(reversed(groups))

    if mode == ExecutionMode.DRY_RUN:
        cancel_event = threading.Event()
        for group in groups:
            for component in group:
                action(cancel_event, component)
        return

    if order:
        for group in groups:
            if not group:
                continue
            if len(group) == 1:
                action(threading.Event(), group[0])
                continue
            with WorkerGroup() as workers:
                for component in group:
                    workers.go(action, workers.cancel_event, component)
        return

    with WorkerGroup() as workers:
        for group in groups:
            for component in group:
                workers.go(action, workers.cancel_event, component)
