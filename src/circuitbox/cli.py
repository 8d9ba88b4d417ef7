from __future__ import annotations

import argparse
import asyncio
import logging

from circuitbox.config import BreakerConfig, CircuitConfig, CounterType, ProbeConfig, TargetConfig
from circuitbox.probe import ProbeResult, run_probe


def _build_config(args: argparse.Namespace) -> ProbeConfig:
    circuit = CircuitConfig(
        window_size_ms=args.window_size_ms,
        error_threshold=args.error_threshold,
        volume_threshold=args.volume_threshold,
        reset_timeout_ms=args.reset_timeout_ms,
        success_threshold=args.success_threshold,
        counter=CounterType(args.counter),
    )
    return ProbeConfig(
        target=TargetConfig(base_url=args.target, method=args.method),
        duration_sec=args.duration,
        rate_per_sec=args.rate,
        circuit=circuit,
        breaker=BreakerConfig(timeout_ms=args.timeout_ms),
    )


def _print_result(result: ProbeResult) -> None:
    print(f"{'sec':>4} {'sent':>5} {'ok':>5} {'reject':>6} {'err%':>6} {'p50ms':>8} {'p99ms':>8}")
    for row in result.per_second:
        print(
            f"{row.second:>4} {row.attempted:>5} {row.succeeded:>5} {row.rejected:>6} "
            f"{row.error_rate * 100:>6.1f} {row.p50_ms:>8.1f} {row.p99_ms:>8.1f}"
        )
    for transition in result.transitions:
        print(f"STATE +{transition.mono_time - result.started_mono:.3f}s: {transition.state.value}")
    print(f"Run complete: {result.run_id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Drive a target URL through a circuit breaker")
    parser.add_argument("--target", required=True, help="Target URL")
    parser.add_argument("--method", default="GET")
    parser.add_argument("--duration", type=int, default=30)
    parser.add_argument("--rate", type=float, default=10.0, help="Requests per second")

    parser.add_argument("--window-size-ms", type=int, default=30_000)
    parser.add_argument("--error-threshold", type=float, default=1)
    parser.add_argument("--volume-threshold", type=int, default=1)
    parser.add_argument("--reset-timeout-ms", type=int, default=30_000)
    parser.add_argument("--success-threshold", type=int, default=1)
    parser.add_argument("--counter", choices=[c.value for c in CounterType], default=CounterType.FIXED.value)
    parser.add_argument("--timeout-ms", type=int, default=None)

    parser.add_argument("--log-level", default="INFO")

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)
    except ValueError as exc:
        parser.error(str(exc))
    result = asyncio.run(run_probe(config))
    _print_result(result)


if __name__ == "__main__":
    main()
