"""
Static environment name to group table.
"""

from __future__ import annotations

from enum import Enum

from qaharness.exceptions import ConfigNotFoundError


class EnvironmentGroup(str, Enum):
    """Deployment category of an environment; also its config subdirectory."""

    DEV = "dev"
    TEST = "test"
    UAT = "uat"
    ONPREM = "onprem"

    def __str__(self) -> str:
        return self.value


ENV_GROUP_MAP: dict[str, EnvironmentGroup] = {
    "D1": EnvironmentGroup.DEV,
    "D2": EnvironmentGroup.DEV,
    "D3": EnvironmentGroup.DEV,
    "T1": EnvironmentGroup.TEST,
    "T2": EnvironmentGroup.TEST,
    "T3": EnvironmentGroup.TEST,
    "T4": EnvironmentGroup.TEST,
    "T5": EnvironmentGroup.TEST,
    "U1": EnvironmentGroup.UAT,
    "U2": EnvironmentGroup.UAT,
    "U3": EnvironmentGroup.UAT,
    "U4": EnvironmentGroup.UAT,
    "QD1": EnvironmentGroup.ONPREM,
    "QD2": EnvironmentGroup.ONPREM,
    "QD3": EnvironmentGroup.ONPREM,
    "QD4": EnvironmentGroup.ONPREM,
}


def known_environments() -> list[str]:
    return list(ENV_GROUP_MAP)


def get_env_group(env_name: str) -> EnvironmentGroup:
    """
    Map an environment name to its group.

    Raises:
        ConfigNotFoundError: If the name is not in the table
    """
    group = ENV_GROUP_MAP.get(env_name)
    if group is None:
        raise ConfigNotFoundError(
            f"Unknown environment: {env_name}. "
            f"Valid environments: {', '.join(known_environments())}",
            env=env_name,
        )
    return group


def is_onprem(env_name: str) -> bool:
    return get_env_group(env_name) is EnvironmentGroup.ONPREM
