from __future__ import annotations

from circuitbox.probe.runner import ProbeResult, ProgressCallback, probe_once, run_probe

__all__ = ["ProbeResult", "ProgressCallback", "probe_once", "run_probe"]
