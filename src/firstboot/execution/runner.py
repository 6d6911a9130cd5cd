# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/execution/runner.py

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from typing import Optional

from ..errors import CommandError, CommandFailed, CommandNotFound, CommandTimeout

log = logging.getLogger("firstboot")


@dataclass
class CommandRunner:
    """
    Runs one executable to completion.

    Output is not captured; the child inherits our stdout/stderr so it lands
    in the console and the boot journal. ``timeout`` is off by default.
    """

    timeout: Optional[float] = None

    def run(self, name: str, *args: str) -> None:
        argv = [name, *args]
        log.info("[cmd] running command name=%s args=%s", name, " ".join(args))

        start = time.time()
        try:
            result = subprocess.run(argv, check=False, timeout=self.timeout)
        except FileNotFoundError as e:
            raise CommandNotFound(f"command not found: {name}", argv) from e
        except subprocess.TimeoutExpired as e:
            raise CommandTimeout(
                f"{name} timed out after {self.timeout}s", argv
            ) from e
        except (OSError, ValueError) as e:
            # ValueError: an embedded NUL byte in the program or an argument
            raise CommandError(f"can't run {name}: {e}", argv) from e

        duration = time.time() - start
        log.debug("[cmd][exit %d] (%.2fs)", result.returncode, duration)

        if result.returncode != 0:
            raise CommandFailed(
                f"{' '.join(argv)} exited with status {result.returncode}",
                argv,
                returncode=result.returncode,
            )
