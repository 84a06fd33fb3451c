"""Command collecting natural events and alerting about nearby ones."""

from hazwatch import eonet
from hazwatch.common import logthis
from hazwatch.pgdb import Pgdb
from hazwatch.push import push
from hazwatch.settings import HazeventsSettings


def run(settings, pgdb=None, session=None):
    """Collect events, then push an alert if any are near. Returns the alert text."""
    logthis("Good day", "INFO")
    if pgdb is None:
        cfg = settings.dbpg
        pgdb = Pgdb(cfg.dburl, cfg.dbport, cfg.dbname, cfg.dbuser, cfg.dbpassword)
    try:
        pgdb.check_connection()
    except Exception as exc:
        print(repr(exc))
    start = pgdb.get_last_record()
    logthis(f"Main calling next EONET Starting from {start}", "INFO")
    try:
        eonet.handle_call(pgdb, settings, start, session)
    except Exception as exc:
        print(repr(exc))
    try:
        message = pgdb.get_alert_events(start, settings.location.radius)
    except Exception as exc:
        print(repr(exc))
        message = None
    if message:
        logthis(f"Sending alert to phone {message!r}", "INFO")
        push(settings.alertzy.account, settings.alertzy.url, "ALERT", message, "2")
    return message


def main(argv=None):
    """Entry point: load settings from the working directory and run once."""
    run(HazeventsSettings.load())
    return 0