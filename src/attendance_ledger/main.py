from __future__ import annotations

import importlib
import logging
from datetime import date

import click
from dotenv import load_dotenv
from flask import Flask, current_app
from flask.cli import FlaskGroup

from .common.datetime_utils import now_local, parse_iso_date
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_ACCRUAL_WORKERS
from .core.enums import PunchSource, PunchType
from .core.exceptions import DomainError
from .core.logging_config import configure_logging
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)

EXTENSION_KEY = "attendance_ledger"


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["DB_CONFIG"] = db_config

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready tables=%d", len(list_tables(db_config)))

    app.extensions[EXTENSION_KEY] = container or build_container(
        db_config=db_config,
        accrual_workers=int(getattr(settings, "ACCRUAL_WORKERS", DEFAULT_ACCRUAL_WORKERS)),
    )

    register_commands(app)
    return app


def _container() -> Container:
    return current_app.extensions[EXTENSION_KEY]


def _date_option(value: str | None) -> date:
    return parse_iso_date(value) if value else now_local().date()


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db_command():
        """Apply the bundled database schema."""
        executed = apply_schema(current_app.config["DB_CONFIG"])
        click.echo(f"schema applied ({executed} statements)")

    @app.cli.command("reconcile")
    @click.option("--org-id", type=int, required=True)
    @click.option("--employee-id", type=int, required=True)
    @click.option("--date", "day", help="YYYY-MM-DD, defaults to today")
    def reconcile_command(org_id: int, employee_id: int, day: str | None):
        """Recompute one employee's attendance record for a day."""
        record = _container().reconciler.reconcile(org_id, employee_id, _date_option(day))
        click.echo(
            f"{record.attendance_date} employee={record.employee_id} status={record.status.value} "
            f"work={record.total_work_minutes} break={record.total_break_minutes} "
            f"late={record.late_minutes} early_exit={record.early_exit_minutes} overtime={record.overtime_minutes}"
        )

    @app.cli.command("reconcile-day")
    @click.option("--date", "day", help="YYYY-MM-DD, defaults to today")
    @click.option("--org-id", type=int, default=None)
    def reconcile_day_command(day: str | None, org_id: int | None):
        """Create missing records (ABSENT / ON_LEAVE) for every active employee."""
        created = _container().reconciler.reconcile_day(_date_option(day), org_id=org_id)
        click.echo(f"created {created} records")

    @app.cli.command("punch")
    @click.option("--org-id", type=int, required=True)
    @click.option("--employee-id", type=int, required=True)
    @click.option("--type", "punch_type", type=click.Choice([t.value for t in PunchType]), required=True)
    @click.option("--time", "punch_time", type=click.DateTime(), default=None)
    @click.option("--source", type=click.Choice([s.value for s in PunchSource]), default=PunchSource.API.value)
    @click.option("--device-info", default=None)
    @click.option("--manual/--no-manual", default=True)
    def punch_command(org_id, employee_id, punch_type, punch_time, source, device_info, manual):
        """Record a punch and reconcile its day."""
        try:
            result = _container().punch_service.record_punch(
                org_id,
                employee_id,
                PunchType(punch_type),
                punch_time=punch_time,
                source=source,
                device_info=device_info,
                is_manual_entry=manual,
            )
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"punch {result.punch.punch_id} recorded; status={result.record.status.value}")

    @app.cli.command("accrue-monthly")
    @click.option("--as-of", "as_of", help="YYYY-MM-DD, defaults to today")
    def accrue_monthly_command(as_of: str | None):
        """Credit MONTHLY leave accruals for the month containing --as-of."""
        result = _container().accrual_scheduler.run_monthly_accrual(_date_option(as_of))
        click.echo(
            f"effective_date={result.effective_date} credited={result.credited} "
            f"skipped={result.skipped} failed={result.failed}"
        )
        for failure in result.failures:
            click.echo(
                f"  failed policy={failure.policy_id} leave_type={failure.leave_type_id} "
                f"employee={failure.employee_id}: {failure.error}",
                err=True,
            )
        if result.failed:
            raise SystemExit(1)

    @app.cli.command("leave-balance")
    @click.option("--employee-id", type=int, required=True)
    @click.option("--leave-type-id", type=int, default=None)
    @click.option("--org-id", type=int, default=None, help="Required without --leave-type-id")
    @click.option("--as-of", "as_of", help="YYYY-MM-DD, defaults to today")
    def leave_balance_command(employee_id: int, leave_type_id: int | None, org_id: int | None, as_of: str | None):
        """Print a derived leave balance, or a summary across the active policy."""
        calculator = _container().balance_calculator
        on_date = _date_option(as_of)
        if leave_type_id is not None:
            balance = calculator.balance_as_of(employee_id, leave_type_id, on_date)
            click.echo(f"{balance}")
            return

        if org_id is None:
            raise click.UsageError("--org-id is required when --leave-type-id is omitted")

        summary = calculator.balance_summary(org_id=org_id, employee_id=employee_id, as_of_date=on_date)
        for b in summary.balances:
            click.echo(f"leave_type={b.leave_type_id} credited={b.credited} deducted={b.deducted} balance={b.balance}")
        click.echo(
            f"total credited={summary.total_credited} deducted={summary.total_deducted} balance={summary.total_balance}"
        )


cli = FlaskGroup(create_app=create_app)
