#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
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
#
#
#
"""Process pool for splitting large matrix reductions into chunks"""

from multiprocessing.pool import Pool
from multiprocessing import get_context
import logging
import sys
from typing import Callable, List, Optional, Sequence

import psutil

from .names import PARALLEL_CHUNKS_PER_PROCESS


def available_processes() -> int:
    """Number of physical cores, or logical cores where the former is unknown"""
    return psutil.cpu_count(logical=False) or psutil.cpu_count() or 1


class EAPool(Pool):
    """Multiprocessing pool that always spawns fresh interpreters

    Forking a process that holds large matrices copies them lazily but is
    unreliable together with threads, so workers are spawned. The __main__
    module's __spec__ and __file__ are hidden while the workers start so that
    they do not re-run the calling script.
    """

    def __init__(self, processes: Optional[int] = None, context=None):
        spec = None
        file = None
        if context is None:
            context = get_context('spawn')
            main = sys.modules['__main__']
            if getattr(main, '__spec__', None):
                spec = main.__spec__
                main.__spec__ = None
            if getattr(main, '__file__', None):
                file = main.__file__
                main.__file__ = None
        try:
            super().__init__(processes=processes, context=context)
        finally:
            # Restore backups
            if spec:
                sys.modules['__main__'].__spec__ = spec
            if file:
                sys.modules['__main__'].__file__ = file


def chunk_ranges(length: int, chunks: int) -> List[range]:
    """Split range(length) into at most `chunks` contiguous, non-empty ranges"""
    chunks = max(1, min(chunks, length))
    size, rest = divmod(length, chunks)
    ranges = []
    start = 0
    for i in range(chunks):
        stop = start + size + (1 if i < rest else 0)
        if stop > start:
            ranges.append(range(start, stop))
        start = stop
    return ranges


def map_chunks(func: Callable, args: Sequence, processes: Optional[int] = None) -> list:
    """Apply func to every element of args, in a pool if more than one process is requested"""
    if processes is None:
        processes = available_processes()
    if processes <= 1 or len(args) <= 1:
        return [func(a) for a in args]
    logging.debug(f"Distributing {len(args)} chunks over {processes} processes.")
    with EAPool(processes) as pool:
        return pool.map(func, args)


def chunk_count(processes: Optional[int] = None) -> int:
    if processes is None:
        processes = available_processes()
    return max(1, processes) * PARALLEL_CHUNKS_PER_PROCESS
