#!/usr/bin/env python3
"""
qaharness command line.

Usage:
    qaharness envs
    qaharness show T3 --format json --section app
    qaharness check                      # APP_ENV or T5
    qaharness --config-dir etc/env --log-level debug check QD1
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import find_dotenv, load_dotenv

from qaharness.certs import build_client_certificate
from qaharness.config import (
    CONFIG_DIR_VAR,
    ENV_GROUP_MAP,
    ENV_SELECTOR_VAR,
    ConfigResolver,
    ResolvedConfig,
)
from qaharness.context import EnvironmentContext
from qaharness.exceptions import CertificateError, HarnessError
from qaharness.log import LogConfig, LoggerFactory, derive_lg, resolve_level
from qaharness.security import SecretMasker, get_masker

from .formatting import FORMATS, mask_secrets, render, select_section
from .output import ConsoleOutput, OutputWriter

if TYPE_CHECKING:
    from qaharness.log import Logger

LOG_LEVELS = ("debug", "info", "warning", "error", "critical", "false")


@dataclass
class CommandContext:
    """What a command needs besides its parsed arguments."""

    lg: Logger
    out: OutputWriter
    err: OutputWriter
    environ: Mapping[str, str]


class Command:
    """Base class for subcommands."""

    name = ""
    help_text = ""

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        pass

    def run(self, args: argparse.Namespace, ctx: CommandContext) -> int:
        raise NotImplementedError

    @staticmethod
    def add_env_arg(parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "env",
            nargs="?",
            default=None,
            help=f"Environment name (default: ${ENV_SELECTOR_VAR} or T5)",
        )

    @staticmethod
    def resolve(
        args: argparse.Namespace, ctx: CommandContext, environ: Mapping[str, str] | None = None
    ) -> tuple[ResolvedConfig, Path | None]:
        resolver = ConfigResolver(
            derive_lg(ctx.lg, "config"),
            root=args.config_dir,
            environ=ctx.environ if environ is None else environ,
        )
        config = resolver.resolve(args.env)
        get_masker().register_config(config)
        return config, resolver.source


class EnvsCommand(Command):
    name = "envs"
    help_text = "List known environments and their groups"

    def run(self, args: argparse.Namespace, ctx: CommandContext) -> int:
        for env_name, group in ENV_GROUP_MAP.items():
            ctx.out.write(f"{env_name:<5} {group.value}")
        return 0


class ShowCommand(Command):
    name = "show"
    help_text = "Display the resolved configuration"

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        self.add_env_arg(parser)
        parser.add_argument(
            "--format",
            "-f",
            choices=FORMATS,
            default="yaml",
            help="Output format (default: yaml)",
        )
        parser.add_argument(
            "--section",
            "-s",
            default=None,
            help="Show only a specific section (e.g. 'app' or 'db.postgres')",
        )
        parser.add_argument(
            "--no-env",
            action="store_true",
            help="Ignore environment variable overrides",
        )
        parser.add_argument(
            "--reveal",
            action="store_true",
            help="Print passwords and passphrases instead of masking them",
        )

    def run(self, args: argparse.Namespace, ctx: CommandContext) -> int:
        environ = None
        if args.no_env:
            environ = {
                var: ctx.environ[var]
                for var in (ENV_SELECTOR_VAR, CONFIG_DIR_VAR)
                if var in ctx.environ
            }
        config, _ = self.resolve(args, ctx, environ)

        data = config.to_dict()
        if not args.reveal:
            data = mask_secrets(data, SecretMasker.DEFAULT_MASK)
        if args.section:
            data = select_section(data, args.section)
        ctx.out.write(render(data, args.format))
        return 0


class CheckCommand(Command):
    name = "check"
    help_text = "Resolve and validate an environment, then print a summary"

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        self.add_env_arg(parser)

    def run(self, args: argparse.Namespace, ctx: CommandContext) -> int:
        config, source = self.resolve(args, ctx)
        env = EnvironmentContext(config, ctx.lg, source)

        database = config.primary_database()
        cert = config.client_cert
        rows = [
            ("Environment", f"{env.name} ({env.group.value})"),
            ("Source", str(source) if source else "-"),
            ("Application", env.app_url),
            (
                "Database",
                f"{config.database_kind} {database.host}:{database.port}"
                if database
                else f"{config.database_kind} (not configured)",
            ),
            ("Certificate", cert.origin if cert else "(not configured)"),
            ("Tags", " ".join(env.tags())),
        ]
        for label, value in rows:
            ctx.out.write(f"{label + ':':<13}{value}")

        for gap in env.check_completeness():
            ctx.out.write(f"warning: {gap}")
        if cert is not None:
            try:
                build_client_certificate(cert, Path.cwd(), derive_lg(ctx.lg, "certs"))
            except CertificateError as e:
                ctx.out.write(f"warning: {e.message.splitlines()[0]}")

        ctx.out.write("OK")
        return 0


_COMMANDS: list[type[Command]] = [EnvsCommand, ShowCommand, CheckCommand]


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, Command]]:
    parser = argparse.ArgumentParser(
        prog="qaharness",
        description="Resolve and inspect e2e harness environment configuration",
    )
    parser.add_argument(
        "--config-dir",
        default=None,
        help=f"Config root directory (default: ${CONFIG_DIR_VAR} or nearest etc/env)",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Log level (default: $LOG_LEVEL or warning)",
    )

    commands: dict[str, Command] = {}
    subparsers = parser.add_subparsers(dest="command", required=True)
    for command_cls in _COMMANDS:
        command = command_cls()
        sub = subparsers.add_parser(command.name, help=command.help_text)
        command.add_args(sub)
        commands[command.name] = command
    return parser, commands


def _create_logger(args: argparse.Namespace, environ: Mapping[str, str]) -> Logger:
    config = LogConfig.from_env(environ, default_level="warning")
    if args.log_level:
        config = replace(config, level=resolve_level(args.log_level))
    # stdout carries command output; logs go to stderr
    return LoggerFactory.create("/qaharness", config, stream=sys.stderr)


def main(
    argv: Sequence[str] | None = None,
    out: OutputWriter | None = None,
    err: OutputWriter | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """
    Entry point for the ``qaharness`` console script.

    Returns:
        0 on success, 1 when the configuration cannot be resolved
    """
    parser, commands = build_parser()
    args = parser.parse_args(argv)

    if environ is None:
        load_dotenv(find_dotenv(usecwd=True), override=False)
        environ = os.environ

    masker = None if getattr(args, "reveal", False) else get_masker()
    out = out if out is not None else ConsoleOutput(masker=masker)
    err = err if err is not None else ConsoleOutput(sys.stderr, masker=masker)

    try:
        lg = _create_logger(args, environ)
        ctx = CommandContext(lg=lg, out=out, err=err, environ=environ)
        return commands[args.command].run(args, ctx)
    except HarnessError as e:
        err.write(f"error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
