from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Callable, List, Mapping, Optional

from ..domain.entities import ConfirmationDecision, FilterMode

ASK_POLICY = "ask"
SYSTEM_POLICIES: tuple[str, ...] = (
    ASK_POLICY,
    ConfirmationDecision.ABORT.value,
    ConfirmationDecision.PROCEED_ALL.value,
    ConfirmationDecision.PROCEED_USER_ONLY.value,
)
DEFAULT_SYSTEM_ACCOUNTS: tuple[str, ...] = (
    "root",
    "SYSTEM",
    "NT AUTHORITY\\SYSTEM",
    "NT AUTHORITY\\LOCAL SERVICE",
    "NT AUTHORITY\\NETWORK SERVICE",
)


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    default_filter: str = FilterMode.USER.value
    system_policy: str = ConfirmationDecision.ABORT.value
    max_workers: int = 1
    exclude_identifiers: List[str] = field(default_factory=list)
    system_uid_max: int = 1000
    system_accounts: List[str] = field(default_factory=lambda: list(DEFAULT_SYSTEM_ACCOUNTS))


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(
        self,
        *,
        config: Optional[SettingsConfig] = None,
        on_save: Optional[Callable[[dict], None]] = None,
    ) -> None:
        self.config = config or SettingsConfig()
        self.on_save = on_save
        self.debug_logging: bool = False

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def default_filter(self) -> FilterMode:
        return FilterMode(self.config.default_filter)

    @default_filter.setter
    def default_filter(self, value: Any) -> None:
        self.config = replace(self.config, default_filter=self._coerce_filter(value))

    @property
    def system_policy(self) -> str:
        return self.config.system_policy

    @system_policy.setter
    def system_policy(self, value: Any) -> None:
        self.config = replace(self.config, system_policy=self._coerce_policy(value))

    @property
    def max_workers(self) -> int:
        return self.config.max_workers

    @max_workers.setter
    def max_workers(self, value: Any) -> None:
        self.config = replace(self.config, max_workers=self._coerce_workers(value))

    @property
    def exclude_identifiers(self) -> List[str]:
        return list(self.config.exclude_identifiers)

    @property
    def system_uid_max(self) -> int:
        return self.config.system_uid_max

    @property
    def system_accounts(self) -> List[str]:
        return list(self.config.system_accounts)

    # ------------------------------------------------------------------
    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_flat_keys = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = set(payload.keys()) - allowed_flat_keys
        if unknown:
            raise ValueError(f"Unsupported settings keys: {', '.join(sorted(str(key) for key in unknown))}")

        updates: dict = {}
        for cfg_key in SettingsConfig.__annotations__.keys():
            if cfg_key in payload:
                updates[cfg_key] = self._coerce_config_value(cfg_key, payload[cfg_key])

        if updates:
            self.config = replace(self.config, **updates)

        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> dict:
        snapshot = asdict(self.config)
        snapshot["debug_logging"] = bool(self.debug_logging)
        return snapshot

    def cmd_save(self) -> None:
        """Hand the current snapshot to ``on_save`` (the CLI wires StorageLocal here)."""
        if self.on_save:
            self.on_save(self.to_dict())

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _coerce_config_value(self, key: str, raw: Any) -> Any:
        if key == "default_filter":
            return self._coerce_filter(raw)
        if key == "system_policy":
            return self._coerce_policy(raw)
        if key == "max_workers":
            return self._coerce_workers(raw)
        if key == "system_uid_max":
            return self._coerce_int(key, raw, allow_negative=False)
        if key in {"exclude_identifiers", "system_accounts"}:
            return self._coerce_str_list(raw, key)
        raise ValueError(f"Unhandled config field: {key}")

    @staticmethod
    def _coerce_filter(value: Any) -> str:
        return FilterMode.parse(value).value

    @staticmethod
    def _coerce_policy(value: Any) -> str:
        token = str(value or "").strip().lower().replace("_", "-")
        if token not in SYSTEM_POLICIES:
            raise ValueError(f"system_policy must be one of: {', '.join(SYSTEM_POLICIES)}.")
        return token

    @classmethod
    def _coerce_workers(cls, value: Any) -> int:
        coerced = cls._coerce_int("max_workers", value, allow_negative=False)
        if coerced < 1:
            raise ValueError("max_workers must be at least 1.")
        return coerced

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)

    @staticmethod
    def _coerce_int(name: str, value: Any, *, allow_negative: bool = True) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        if isinstance(value, (int, float)):
            coerced = int(value)
        elif isinstance(value, str):
            try:
                coerced = int(value.strip())
            except (TypeError, ValueError) as exc:
                raise ValueError(f"{name} must be an integer.") from exc
        else:
            raise ValueError(f"{name} must be an integer.")
        if not allow_negative and coerced < 0:
            raise ValueError(f"{name} must be non-negative.")
        return coerced

    @staticmethod
    def _coerce_str_list(value: Any, label: str) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str) or not isinstance(value, (list, tuple, set)):
            raise ValueError(f"{label} must be a list of strings.")
        normalized: List[str] = []
        for item in value:
            text = str(item).strip()
            if text and text not in normalized:
                normalized.append(text)
        return normalized
