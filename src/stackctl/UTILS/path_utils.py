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
Utilities for resolving host paths.
"""
import os

class PathResolutionError(Exception):
    """
    Raised when a host path cannot be turned into an absolute path.
    """

def expand_path(path: str) -> str:
    """
    Expands a leading home-directory marker and makes the path absolute.

    :param path: Path that may start with ``~`` or be relative.
    :return: The absolute path.
    :raises PathResolutionError: If the home directory cannot be resolved.
    """
    if path.startswith("~"):
        expanded = os.path.expanduser(path)
        # expanduser hands the path back unchanged when it cannot find a home
        if expanded.startswith("~"):
            raise PathResolutionError(f"Unable to resolve home directory in path {path!r}")
        path = expanded
    return os.path.abspath(path)
