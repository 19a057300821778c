"""Hands render jobs to the external rendering engine.

The engine is an opaque child process that receives the path of a JSON job
description as its last argument. It reports the finished artifact either
by writing a small JSON result file (preferred) or by printing a
"Video created successfully: <path>" line.
"""

import json
import logging
import re
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Sequence, Union

from models.content import RenderJob
from services.errors import RenderError

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "Video created successfully:"
_SUCCESS_LINE = re.compile(rf"^\s*{re.escape(SUCCESS_MARKER)}\s*(.+?)\s*$", re.MULTILINE)


def parse_success_marker(stdout: str) -> Optional[str]:
    """Return the path from the last success marker line, if any."""
    matches = _SUCCESS_LINE.findall(stdout or "")
    return matches[-1] if matches else None


class RenderDispatcher:
    """Serializes a RenderJob and runs the renderer to completion."""

    def __init__(
        self,
        temp_dir: str,
        renderer_command: Union[str, Sequence[str]] = "reelsmith-render",
        timeout: float = 1800.0,
    ):
        """Initialize the dispatcher.

        Args:
            temp_dir: Scratch directory for job and result files
            renderer_command: Command line (string or argv list) of the renderer
            timeout: Seconds before the render is abandoned
        """
        self.temp_dir = Path(temp_dir)
        if isinstance(renderer_command, str):
            self.renderer_argv = shlex.split(renderer_command)
        else:
            self.renderer_argv = list(renderer_command)
        self.timeout = timeout

        if not self.renderer_argv:
            raise ValueError("renderer_command must not be empty")

    def write_job_file(self, job: RenderJob, scratch_dir: Optional[Path] = None) -> tuple[Path, Path]:
        """Write the job description and return (job_path, result_path)."""
        folder = Path(scratch_dir) if scratch_dir else self.temp_dir
        folder.mkdir(parents=True, exist_ok=True)
        stem = Path(job.output_path).stem
        job_path = folder / f"render_job_{stem}.json"
        result_path = folder / f"render_result_{stem}.json"

        payload = job.to_dict()
        payload["result_file"] = str(result_path)

        with open(job_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)

        # A leftover result file would be mistaken for this run's answer
        result_path.unlink(missing_ok=True)
        return job_path, result_path

    def dispatch(self, job: RenderJob, scratch_dir: Optional[Path] = None) -> Optional[str]:
        """Render a job, blocking until the renderer exits.

        Args:
            job: Fully built RenderJob
            scratch_dir: Where the job and result files go (temp_dir by default)

        Returns:
            Final artifact path, or None if the renderer exited 0 without
            reporting one

        Raises:
            RenderError: renderer could not start, timed out or exited non-zero
        """
        try:
            job_path, result_path = self.write_job_file(job, scratch_dir)
        except OSError as e:
            raise RenderError(f"Cannot write render job file: {e}") from e

        cmd = [*self.renderer_argv, str(job_path)]
        logger.info(f"Rendering {len(job.media)} media entries -> {job.output_path}")
        logger.debug(f"Command: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError as e:
            raise RenderError(f"Renderer not found: {self.renderer_argv[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(
                f"Renderer timed out after {self.timeout}s",
                stdout=_as_text(e.stdout),
                stderr=_as_text(e.stderr),
            ) from e
        except OSError as e:
            raise RenderError(f"Cannot start renderer: {e}") from e

        if result.returncode != 0:
            logger.error(f"Renderer stderr: {result.stderr[-1000:]}")
            raise RenderError(
                f"Renderer exited with code {result.returncode}: {result.stderr[:500]}",
                stdout=result.stdout,
                stderr=result.stderr,
                returncode=result.returncode,
            )

        logger.debug(f"Renderer output: {result.stdout[-1000:]}")

        output_path = self._read_result_file(result_path) or parse_success_marker(result.stdout)
        if output_path is None:
            logger.warning("Renderer exited cleanly but reported no output path")
        else:
            logger.info(f"Render complete: {output_path}")
        return output_path

    @staticmethod
    def _read_result_file(result_path: Path) -> Optional[str]:
        if not result_path.exists():
            return None
        try:
            data = json.loads(result_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable render result file {result_path}: {e}")
            return None
        output_path = data.get("output_path") if isinstance(data, dict) else None
        return output_path or None


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
