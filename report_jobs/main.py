"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service, runs one report through the polling client, or prunes old report jobs.
"""

import argparse
import asyncio
import json

import uvicorn

from report_jobs.bootstrap import (
    bootstrap_create_application,
    bootstrap_create_report_poller,
    bootstrap_create_report_service,
    bootstrap_create_report_transport,
)
from report_jobs.config import AppSettings, config_load_settings
from report_jobs.domain import ORDER_STATUSES, ReportFilters, domain_parse_optional_datetime
from report_jobs.logging_setup import logging_configure
from report_jobs.polling import Completed, Failed, JobRequest, JobState, Pending, job_state_label


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with status 1 when a report does not complete.
    """

    argument_parser = argparse.ArgumentParser(description="Admin report jobs runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "report-run", "cleanup-jobs"),
        help="Runtime command: `api` starts server, `report-run` submits one report and polls until it "
        "finishes, `cleanup-jobs` deletes finished report jobs past retention",
        type=str,
    )
    argument_parser.add_argument("--date-from", dest="date_from", type=str, help="ISO date lower bound")
    argument_parser.add_argument("--date-to", dest="date_to", type=str, help="ISO date upper bound")
    argument_parser.add_argument(
        "--status",
        dest="statuses",
        action="append",
        choices=ORDER_STATUSES,
        default=[],
        help="Order status filter; repeat for several statuses",
    )
    argument_parser.add_argument("--product-id", dest="product_id", type=str, help="Product filter")
    argument_parser.add_argument(
        "--force-async",
        dest="force_async",
        action="store_true",
        help="Ask the backend to process the report as a background job",
    )
    argument_parser.add_argument(
        "--days-old",
        dest="days_old",
        type=int,
        help="Retention window in days for `cleanup-jobs` (defaults to REPORT_CLEANUP_DAYS)",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    logging_configure(settings.log_level)

    if parsed_arguments.command == "report-run":
        try:
            filters = ReportFilters(
                date_from=domain_parse_optional_datetime(parsed_arguments.date_from, "--date-from"),
                date_to=domain_parse_optional_datetime(parsed_arguments.date_to, "--date-to"),
                statuses=tuple(parsed_arguments.statuses),
                product_id=parsed_arguments.product_id,
                force_async=parsed_arguments.force_async,
            )
        except ValueError as error:
            argument_parser.error(str(error))

        try:
            final_state = asyncio.run(main_run_report(settings=settings, filters=filters))
        except KeyboardInterrupt:
            raise SystemExit(130) from None
        if not isinstance(final_state, Completed):
            raise SystemExit(1)
        return

    if parsed_arguments.command == "cleanup-jobs":
        days_old = parsed_arguments.days_old if parsed_arguments.days_old is not None else settings.report_cleanup_days
        report_service = bootstrap_create_report_service(settings=settings)
        deleted_count = report_service.report_cleanup_old_jobs(days_old=days_old)
        print(f"deleted report jobs: {deleted_count}")
        return

    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_config=None,
    )


async def main_run_report(settings: AppSettings, filters: ReportFilters) -> JobState:
    """Submit one report through the polling client and wait for its terminal state.

    Args:
        settings: Validated runtime settings.
        filters: Report filters to submit.

    Returns:
        JobState: Terminal lifecycle state.
    """

    async with bootstrap_create_report_transport(settings=settings) as transport:
        poller = bootstrap_create_report_poller(transport=transport, settings=settings)
        poller.on_state_change(main_print_state)
        poller.submit(JobRequest(filters.filters_to_query_parameters()))
        try:
            return await poller.wait_for_terminal()
        finally:
            await poller.aclose()


def main_print_state(state: JobState) -> None:
    """Print one lifecycle transition to stdout."""

    label = job_state_label(state)
    if isinstance(state, Pending):
        print(f"{label}: job_id={state.job_id} status={state.last_known_status}")
    elif isinstance(state, Completed):
        print(f"{label}:")
        print(json.dumps(state.result, indent=2, sort_keys=True))
    elif isinstance(state, Failed):
        print(f"{label}: {state.error_message}")
    else:
        print(label)


if __name__ == "__main__":
    main()
