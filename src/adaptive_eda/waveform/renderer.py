"""ASCII EDA rendering with SCR annotations for terminal display."""

import numpy as np

from adaptive_eda.analysis.types import SCRResult
from adaptive_eda.constants import DEFAULT_RENDER_HEIGHT, DEFAULT_RENDER_WIDTH

SIGNAL_CHAR = "·"
PEAK_CHAR = "*"
ONSET_CHAR = "o"
HALF_RECOVERY_CHAR = "x"


def _format_time_offset(seconds: float) -> str:
    """Format seconds to HH:MM:SS."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class AsciiSCRRenderer:
    """Render an EDA trace with SCR onsets, peaks and half-recovery points."""

    def __init__(
        self,
        width: int = DEFAULT_RENDER_WIDTH,
        height: int = DEFAULT_RENDER_HEIGHT,
        show_events: bool = True,
    ):
        """
        Initialize renderer.

        Args:
            width: Chart width in characters
            height: Chart height in lines
            show_events: Whether to list the SCRs below the chart
        """
        self.width = width
        self.height = height
        self.show_events = show_events

    def render(
        self,
        timestamps: np.ndarray,
        values: np.ndarray,
        result: SCRResult | None = None,
    ) -> str:
        """
        Generate ASCII representation of the signal.

        Args:
            timestamps: Timestamp array in seconds
            values: EDA values in uS (NaN samples are left blank)
            result: Detection result whose SCRs are overlaid

        Returns:
            ASCII art string
        """
        finite = values[~np.isnan(values)] if len(values) else values
        if len(timestamps) == 0 or len(finite) == 0:
            return "No data to render"

        lines = ["Fixed-Adaptive Thresholding EDA analysis"]
        if result is not None:
            lines.append(
                f"RAP threshold: {result.rap_threshold_percent:g}% | "
                f"Sample rate: {result.sampling_rate:g}Hz | "
                f"SCRs: {result.scr_total_count}"
            )
        lines.append("")

        y_label_width = 7
        chart_width = max(1, self.width - y_label_width - 1)
        step = max(1, int(np.ceil(len(values) / chart_width)))
        n_cols = int(np.ceil(len(values) / step))

        min_val = float(np.min(finite))
        max_val = float(np.max(finite))
        val_range = max_val - min_val if max_val != min_val else 1.0

        grid = [[" "] * n_cols for _ in range(self.height)]

        def to_row(value: float) -> int:
            normalized = (value - min_val) / val_range
            return int(round((1 - normalized) * (self.height - 1)))

        for col in range(n_cols):
            column_values = values[col * step : (col + 1) * step]
            column_values = column_values[~np.isnan(column_values)]
            if len(column_values) == 0:
                continue
            grid[to_row(float(np.mean(column_values)))][col] = SIGNAL_CHAR

        if result is not None:
            for event in result.events:
                grid[to_row(event.onset_value)][event.onset_index // step] = ONSET_CHAR
                if event.half_recovery_index is not None:
                    grid[to_row(event.half_recovery_value)][
                        event.half_recovery_index // step
                    ] = HALF_RECOVERY_CHAR
                grid[to_row(event.peak_value)][event.peak_index // step] = PEAK_CHAR

        for row in range(self.height):
            row_val = max_val - (row / max(1, self.height - 1)) * val_range
            lines.append(f"{row_val:>6.2f} │" + "".join(grid[row]))

        lines.append(" " * y_label_width + "└" + "─" * n_cols)

        start_time_str = _format_time_offset(timestamps[0])
        end_time_str = _format_time_offset(timestamps[-1])
        spacing = max(0, n_cols - len(start_time_str) - len(end_time_str))
        lines.append(
            f"{' ' * y_label_width} {start_time_str}{' ' * spacing}{end_time_str}"
        )
        lines.append(
            f"Legend: {SIGNAL_CHAR} EDA signal  {PEAK_CHAR} SCR peak  "
            f"{ONSET_CHAR} SCR onset  {HALF_RECOVERY_CHAR} SCR half-recovery"
        )

        if self.show_events and result is not None:
            lines.append("")
            lines.append("SCRs:")
            if result.events:
                for i, event in enumerate(result.events, start=1):
                    if event.half_recovery_time is not None:
                        recovery = f"half-recovery at {event.half_recovery_time:.2f}s"
                    else:
                        recovery = "no half-recovery"
                    lines.append(
                        f"  {i:>3}. onset {event.onset_time:.2f}s, "
                        f"peak {event.peak_time:.2f}s, "
                        f"amplitude {event.amplitude:.3f}uS "
                        f"({event.response_amplitude_percent:.1f}%), {recovery}"
                    )
            else:
                lines.append("  (none)")

        return "\n".join(lines)
