"""Main entry point for the Gmail flight scanner"""
import argparse
import logging

from flight_scanner.config import settings
from flight_scanner.dedup import new_dedup_session
from flight_scanner.fallback import GeminiExtractor
from flight_scanner.models import STATUS_SUCCESS
from flight_scanner.parsers import TextNormalizer
from flight_scanner.pipeline import EmailProcessor, ScanLogger
from flight_scanner.search import GmailSource, build_gmail_service, load_credentials
from flight_scanner.state import init_database, StateManager
from flight_scanner.utils import setup_logging, DryRunManager

logger = logging.getLogger(__name__)


def open_mail_source():
    """Authenticate with Gmail and return a GmailSource"""
    creds = load_credentials(
        scopes=settings.SCOPES,
        credentials_file=settings.CREDENTIALS_FILE,
        token_file=settings.TOKEN_FILE
    )
    return GmailSource(
        lambda: build_gmail_service(creds, timeout=settings.GMAIL_TIMEOUT),
        max_retries=settings.MAX_RETRIES
    )


def run_scan(source, state_manager, user_id, query, limit, workers):
    """
    Scan the mailbox once and store new flights

    Args:
        source: GmailSource
        state_manager: StateManager
        user_id: Owner of the stored flights
        query: Gmail search query
        limit: Maximum number of emails to scan
        workers: Worker pool size

    Returns:
        ScanLogger with one entry per scanned email
    """
    scan_logger = ScanLogger()
    processor = EmailProcessor(
        normalizer=TextNormalizer(fetch_attachment=source.get_attachment),
        store=state_manager,
        owner_id=user_id,
        fallback=GeminiExtractor(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            timeout=settings.GEMINI_TIMEOUT,
            max_body_chars=settings.GEMINI_MAX_BODY_CHARS
        ),
        session=new_dedup_session(),
        scan_logger=scan_logger
    )

    state_manager.update_sync_status(user_id, 'in_progress')
    try:
        message_ids = source.list_candidate_messages(query, limit=limit)
        logger.info(f"Found {len(message_ids)} messages to process")
        processor.process_many(message_ids, source.get_raw_email, max_workers=workers)
    except Exception as e:
        logger.error(f"Scan failed: {e}")
        state_manager.update_sync_status(user_id, 'failed', error_message=str(e))
        raise

    for entry in scan_logger.entries():
        state_manager.record_scan_result(entry.email_id, user_id, entry.status, entry.reason)

    summary = scan_logger.summary()
    state_manager.update_sync_status(
        user_id, 'completed',
        emails_scanned=summary['total'],
        flights_found=summary[STATUS_SUCCESS]
    )
    return scan_logger


def report_scan(scan_logger, sample_size):
    """Log scan totals and a sample of emails that could not be parsed"""
    summary = scan_logger.summary()

    logger.info("=" * 80)
    logger.info("SCAN SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Scanned:        {summary['total']}")
    logger.info(f"Flights found:  {summary['success']}")
    logger.info(f"Skipped:        {summary['skipped']}")
    logger.info(f"No flight data: {summary['no_flight_data']}")
    logger.info(f"Failed:         {summary['failed']}")
    logger.info(f"Success rate:   {summary['success_rate']}%")

    unparseable = scan_logger.unparseable()
    if unparseable:
        logger.info(f"Unparseable emails (showing {min(sample_size, len(unparseable))} "
                    f"of {len(unparseable)}):")
        for entry in unparseable[:sample_size]:
            logger.info(f"  [{entry.status}] {entry.subject[:70]}")
    logger.info("=" * 80)


def show_stats(state_manager, user_id=None):
    """Display processing statistics"""
    logger.info("=" * 80)
    logger.info("PROCESSING STATISTICS")
    logger.info("=" * 80)

    for stat in state_manager.get_scan_stats(user_id):
        logger.info(f"{stat['status']:15s} | {stat['count']:5d}")

    if user_id is not None:
        sync = state_manager.get_sync_status(user_id)
        if sync:
            logger.info(f"Last sync: {sync['last_sync_at']} ({sync['sync_status']}), "
                        f"{sync['emails_scanned']} scanned, {sync['flights_found']} flights found")
        logger.info(f"Stored flights: {state_manager.count_flights(user_id)}")

    logger.info("=" * 80)


def build_arg_parser():
    parser = argparse.ArgumentParser(
        description='Scan Gmail for flight booking confirmations',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan the latest 100 candidate emails without storing anything
  python run.py scan --dry-run

  # Scan up to 500 emails with 8 workers
  python run.py scan --limit 500 --workers 8

  # Show statistics
  python run.py stats --email me@example.com
        """
    )
    parser.add_argument('--log-level', default=settings.LOG_LEVEL,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    scan = subparsers.add_parser('scan', help='Scan the mailbox for flight bookings')
    scan.add_argument('--email', help='Account email (default: the authenticated Gmail address)')
    scan.add_argument('--query', default=settings.SEARCH_QUERY,
                      help='Gmail search query (default from settings)')
    scan.add_argument('--limit', type=int, default=settings.SCAN_LIMIT,
                      help=f'Maximum number of emails to scan (default: {settings.SCAN_LIMIT})')
    scan.add_argument('--workers', type=int, default=settings.MAX_WORKERS,
                      help=f'Concurrent email workers (default: {settings.MAX_WORKERS})')
    scan.add_argument('--dry-run', action='store_true',
                      help='Extract flights without storing them')

    stats = subparsers.add_parser('stats', help='Show processing statistics and exit')
    stats.add_argument('--email', help='Limit statistics to this account')

    return parser


def main(argv=None):
    """Main entry point"""
    args = build_arg_parser().parse_args(argv)

    setup_logging(log_level=args.log_level, log_file=settings.LOG_FILE)

    init_database(settings.DB_PATH)
    state_manager = StateManager(settings.DB_PATH)

    if args.command == 'stats':
        user = state_manager.get_user_by_email(args.email) if args.email else None
        if args.email and not user:
            logger.info(f"No scans recorded for {args.email}")
            return
        show_stats(state_manager, user['id'] if user else None)
        return

    if args.dry_run:
        DryRunManager.enable()

    logger.info("Gmail Flight Scanner")
    logger.info(f"Dry-run mode: {DryRunManager.is_enabled()}")

    source = open_mail_source()
    email = args.email or source.get_profile_email()
    user_id = state_manager.get_or_create_user(email)

    scan_logger = run_scan(source, state_manager, user_id, args.query, args.limit, args.workers)
    report_scan(scan_logger, settings.UNPARSEABLE_SAMPLE_SIZE)

    logger.info("All operations complete!")


if __name__ == '__main__':
    main()
