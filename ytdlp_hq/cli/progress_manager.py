"""
A Rich spinner that shows which pipeline stage is running while the external
tools work. yt-dlp and FFmpeg output is captured, so there is no byte progress.
"""

from contextlib import contextmanager

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn


class StageProgress:
    """Shows one spinner line per stage, marking each as done or failed."""

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._completed: list[str] = []

    def __enter__(self):
        if self.enabled:
            self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            self.progress.stop()
        return False

    @contextmanager
    def stage(self, description: str):
        if not self.enabled:
            yield
            return
        task_id = self.progress.add_task(f"[cyan]{description}...[/cyan]", total=1)
        try:
            yield
        except BaseException:
            self.progress.update(task_id, description=f"[red]✗ {description}[/red]")
            raise
        else:
            self.progress.update(
                task_id, description=f"[green]✓ {description}[/green]", completed=1
            )
            self._completed.append(description)
        finally:
            self.progress.stop_task(task_id)

    @property
    def completed_stages(self) -> list[str]:
        return list(self._completed)
