"""
C64 SDK Configuration
=====================

Program layout constants and assembler configuration. Configuration can
come from:
- Default values (defined here)
- Constructor arguments
- Environment variables (AssemblerConfig.from_env)

Program Layout
--------------
A C64 ".prg" file starts with a 2-byte little-endian load address. BASIC
programs load at $0801, so the assembler places a one-line BASIC program
there ("SYS 2061") which jumps to the machine code that follows it:

    $0801  0C 08         pointer to the next BASIC line ($080C)
    $0803  00 00         line number 0
    $0805  9E            SYS token
    $0806  32 30 36 31   "2061"
    $080A  00            end of line
    $080B  00 00         end of program
    $080D  ...           assembled code
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

logger = logging.getLogger(__name__)


# Where BASIC programs are loaded; also the program counter at the start
# of every assembly pass.
LOAD_ADDRESS = 0x0801

# First address after the auto-run stub (decimal 2061).
START_ADDRESS = 0x080D


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        max_errors: Maximum number of diagnostics to keep (None = no limit);
                    assembly always runs to completion either way
        verbose: Log per-pass progress at INFO level
    """

    max_errors: Optional[int] = None
    verbose: bool = False

    @property
    def load_address(self) -> int:
        return LOAD_ADDRESS

    @property
    def start_address(self) -> int:
        return START_ADDRESS

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            C64_SDK_MAX_ERRORS: Maximum diagnostics to keep (integer)
            C64_SDK_VERBOSE: "1", "true" or "yes" to enable verbose mode

        Returns:
            AssemblerConfig with values from environment or defaults
        """
        config = cls()

        if max_errors := os.environ.get("C64_SDK_MAX_ERRORS"):
            try:
                config.max_errors = int(max_errors)
            except ValueError:
                logger.warning(f"Ignoring invalid C64_SDK_MAX_ERRORS={max_errors!r}")

        if verbose := os.environ.get("C64_SDK_VERBOSE"):
            config.verbose = verbose.strip().lower() in ("1", "true", "yes")

        return config
