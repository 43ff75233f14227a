"""Fit per-member raw mini-coins into the period's pool and per-member bounds.

Two pure steps over a fixed-order list:

``adjust_to_pool``
    Scale proportionally when the raw total exceeds the pool. Every member but
    the last is floored; the last takes the remainder so the sum is exactly the
    pool total.
``performance_adjust``
    Clamp each value into ``[min_coins, max_coins]``. Surplus freed by clamping
    down is not redistributed, and clamping up is not reconciled against the
    pool; keeping ``min_coins * n <= pool_total`` is a configuration concern.
"""
from __future__ import annotations

from typing import Sequence

from compensation.domain import SalaryConfigSnapshot


def adjust_to_pool(raw: Sequence[int], raw_total: int, pool_total: int) -> list[int]:
    if raw_total <= pool_total or not raw:
        return list(raw)

    adjusted: list[int] = []
    allocated = 0
    for coins in raw[:-1]:
        share = (coins * pool_total) // raw_total
        adjusted.append(share)
        allocated += share
    adjusted.append(pool_total - allocated)
    return adjusted


def performance_adjust(adjusted: Sequence[int], min_coins: int, max_coins: int) -> list[int]:
    return [min(max(coins, min_coins), max_coins) for coins in adjusted]


def distribute(raw: Sequence[int], config: SalaryConfigSnapshot) -> list[int]:
    """Run both steps with the bounds taken from ``config``."""

    adjusted = adjust_to_pool(raw, sum(raw), config.salary_pool_total)
    return performance_adjust(adjusted, config.mini_coins_min, config.mini_coins_max)
