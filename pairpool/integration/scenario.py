"""
Scenario runner: drive one pool through a scripted list of operations.

This is an imperative-shell wrapper around the pool facade:
- Parses a scenario mapping (usually loaded from YAML) into typed steps.
- Builds in-memory asset ledgers, funds accounts, and grants the pool allowances.
- Applies each step and records an accepted/rejected outcome with the error code.

Scenario shape:

    config: {strict_custody: false}          # optional, see PoolConfig
    assets:
      - {asset_id: "0x11...", symbol: TKA}
      - {asset_id: "0x22...", symbol: TKB}
    accounts:
      alice: {TKA: 1000, TKB: 4000}
    steps:
      - {op: add_liquidity, caller: alice, amount_a: 100, amount_b: 400}
      - {op: swap, caller: alice, asset_in: TKA, asset_out: TKB, amount_in: 10}
      - {op: remove_liquidity, caller: alice, liquidity: 50}
      - {op: donate, caller: alice, asset: TKA, amount: 5}
      - {op: sync}
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from ..core.config import MAX_UINT256, PoolConfig
from ..core.errors import PoolError, TransferFailedError
from ..core.events import event_to_dict
from ..core.pool import Pool
from ..state.balances import LedgerError, TokenLedger
from ..state.pools import normalize_asset_id

logger = logging.getLogger(__name__)

STEP_OPS = ("add_liquidity", "remove_liquidity", "swap", "sync", "donate")

_STEP_FIELDS: Dict[str, Tuple[str, ...]] = {
    "add_liquidity": ("caller", "amount_a", "amount_b"),
    "remove_liquidity": ("caller", "liquidity"),
    "swap": ("caller", "asset_in", "asset_out", "amount_in"),
    "sync": (),
    "donate": ("caller", "asset", "amount"),
}


class ScenarioError(ValueError):
    """Raised for a malformed scenario document."""


@dataclass(frozen=True)
class AssetSpec:
    asset_id: str
    symbol: str


@dataclass(frozen=True)
class Step:
    op: str
    args: Mapping[str, Any]


@dataclass(frozen=True)
class Scenario:
    assets: Tuple[AssetSpec, AssetSpec]
    accounts: Mapping[str, Mapping[str, int]]
    steps: Tuple[Step, ...]
    config: PoolConfig = PoolConfig()


@dataclass(frozen=True)
class StepOutcome:
    index: int
    op: str
    ok: bool
    result: Any = None
    error_code: Optional[str] = None
    error: Optional[str] = None


@dataclass
class ScenarioResult:
    outcomes: List[StepOutcome] = field(default_factory=list)
    snapshot: Dict[str, Any] = field(default_factory=dict)
    state_root: str = ""
    events: List[Dict[str, Any]] = field(default_factory=list)
    balances: Dict[str, Dict[str, int]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcomes": [
                {
                    "index": o.index,
                    "op": o.op,
                    "ok": o.ok,
                    "result": list(o.result) if isinstance(o.result, tuple) else o.result,
                    "error_code": o.error_code,
                    "error": o.error,
                }
                for o in self.outcomes
            ],
            "snapshot": self.snapshot,
            "state_root": self.state_root,
            "events": self.events,
            "balances": self.balances,
        }


def _require_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ScenarioError(f"{name} must be a mapping")
    return value


def _require_amount(value: Any, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ScenarioError(f"{name} must be a non-negative int")
    return value


def parse_scenario(data: Any) -> Scenario:
    doc = _require_mapping(data, "scenario")

    try:
        config = PoolConfig.from_mapping(doc.get("config"))
    except PoolError as exc:
        raise ScenarioError(str(exc)) from exc

    raw_assets = doc.get("assets")
    if not isinstance(raw_assets, list) or len(raw_assets) != 2:
        raise ScenarioError("assets must be a list of exactly two entries")
    assets: List[AssetSpec] = []
    for i, raw in enumerate(raw_assets):
        entry = _require_mapping(raw, f"assets[{i}]")
        try:
            asset_id = normalize_asset_id(entry.get("asset_id"))
        except (TypeError, ValueError) as exc:
            raise ScenarioError(f"assets[{i}].asset_id: {exc}") from exc
        symbol = entry.get("symbol", asset_id)
        if not isinstance(symbol, str) or not symbol:
            raise ScenarioError(f"assets[{i}].symbol must be a non-empty string")
        assets.append(AssetSpec(asset_id=asset_id, symbol=symbol))
    if assets[0].asset_id == assets[1].asset_id:
        raise ScenarioError(f"assets must be distinct: {assets[0].asset_id}")
    refs = {assets[0].symbol, assets[0].asset_id}
    clash = refs & {assets[1].symbol, assets[1].asset_id}
    if clash:
        raise ScenarioError(f"asset reference used twice: {', '.join(sorted(clash))}")

    accounts: Dict[str, Dict[str, int]] = {}
    for holder, holdings in _require_mapping(doc.get("accounts", {}), "accounts").items():
        accounts[str(holder)] = {
            str(ref): _require_amount(amount, f"accounts.{holder}.{ref}")
            for ref, amount in _require_mapping(holdings, f"accounts.{holder}").items()
        }

    raw_steps = doc.get("steps", [])
    if not isinstance(raw_steps, list):
        raise ScenarioError("steps must be a list")
    steps: List[Step] = []
    for i, raw in enumerate(raw_steps):
        entry = dict(_require_mapping(raw, f"steps[{i}]"))
        op = entry.pop("op", None)
        if op not in _STEP_FIELDS:
            raise ScenarioError(f"steps[{i}].op must be one of {', '.join(STEP_OPS)}")
        missing = [name for name in _STEP_FIELDS[op] if name not in entry]
        if missing:
            raise ScenarioError(f"steps[{i}] ({op}) missing {', '.join(missing)}")
        steps.append(Step(op=op, args=entry))

    return Scenario(assets=(assets[0], assets[1]), accounts=accounts, steps=tuple(steps), config=config)


def load_scenario(path: str | Path) -> Scenario:
    text = Path(path).read_text(encoding="utf-8")
    return parse_scenario(yaml.safe_load(text))


class _Runner:
    def __init__(self, scenario: Scenario) -> None:
        self.ledgers: Dict[str, TokenLedger] = {}
        for spec in scenario.assets:
            ledger = TokenLedger(spec.asset_id, symbol=spec.symbol)
            self.ledgers[spec.symbol] = ledger
            self.ledgers[spec.asset_id] = ledger

        self.assets = scenario.assets
        first, second = scenario.assets
        self.pool = Pool(self.ledgers[first.symbol], self.ledgers[second.symbol], config=scenario.config)

        for holder, holdings in scenario.accounts.items():
            for ref, amount in holdings.items():
                ledger = self.ledger(ref)
                ledger.mint(holder, amount)
                ledger.approve(holder, self.pool.address, MAX_UINT256)
        self.holders = sorted(scenario.accounts)

    def ledger(self, ref: Any) -> TokenLedger:
        ledger = self.ledgers.get(str(ref))
        if ledger is None and isinstance(ref, str):
            try:
                ledger = self.ledgers.get(normalize_asset_id(ref))
            except ValueError:
                ledger = None
        if ledger is None:
            raise ScenarioError(f"unknown asset reference: {ref!r}")
        return ledger

    def apply(self, step: Step) -> Any:
        a = step.args
        opts = {k: v for k, v in a.items() if k not in _STEP_FIELDS[step.op]}
        if step.op == "add_liquidity":
            return self.pool.add_liquidity(a["caller"], a["amount_a"], a["amount_b"], **opts)
        if step.op == "remove_liquidity":
            return self.pool.remove_liquidity(a["caller"], a["liquidity"], **opts)
        if step.op == "swap":
            return self.pool.swap(
                a["caller"],
                self.ledger(a["asset_in"]).asset_id,
                self.ledger(a["asset_out"]).asset_id,
                a["amount_in"],
                **opts,
            )
        if step.op == "sync":
            return self.pool.sync(**opts)
        # donate: a plain transfer into custody that bypasses the engines.
        if opts:
            raise ScenarioError(f"donate takes no options: {', '.join(sorted(opts))}")
        try:
            self.ledger(a["asset"]).transfer(a["caller"], self.pool.address, a["amount"])
        except LedgerError as exc:
            raise TransferFailedError(f"donation failed: {exc}") from exc
        return None

    def balances(self) -> Dict[str, Dict[str, int]]:
        out: Dict[str, Dict[str, int]] = {}
        for holder in self.holders + [self.pool.address]:
            out[holder] = {spec.symbol: self.ledgers[spec.symbol].balance_of(holder) for spec in self.assets}
        return out


def run_scenario(scenario: Scenario) -> ScenarioResult:
    """
    Apply every step of `scenario` to a fresh pool.

    Pool rejections are recorded per step and do not stop the run; anything
    else (a malformed step, a programming error) propagates.
    """
    runner = _Runner(scenario)
    result = ScenarioResult()

    for index, step in enumerate(scenario.steps):
        try:
            value = runner.apply(step)
        except PoolError as exc:
            logger.info("step %d (%s) rejected: %s", index, step.op, exc.code)
            result.outcomes.append(
                StepOutcome(index=index, op=step.op, ok=False, error_code=exc.code, error=str(exc))
            )
            continue
        except TypeError as exc:
            raise ScenarioError(f"steps[{index}] ({step.op}): {exc}") from exc
        result.outcomes.append(StepOutcome(index=index, op=step.op, ok=True, result=value))

    result.snapshot = runner.pool.snapshot()
    result.state_root = runner.pool.state_root()
    result.events = [event_to_dict(e) for e in runner.pool.events]
    result.balances = runner.balances()
    return result
