"""PostgreSQL storage of hazard events."""

import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from hazwatch.common import logthis
from hazwatch.errors import DatabaseError, DeserializationError


def _fmt_time(stamp):
    stamp = stamp.astimezone(timezone.utc) if stamp.tzinfo else stamp
    text = stamp.strftime("%Y-%m-%d %H:%M:%S")
    if stamp.microsecond:
        if stamp.microsecond % 1000 == 0:
            text += f".{stamp.microsecond // 1000:03d}"
        else:
            text += f".{stamp.microsecond:06d}"
    return text + " UTC"


def _fmt_num(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def alert_events_query(dt_start, distance):
    """Query counting recent events per category within a distance."""
    return f"""select distinct category_id, coalesce(distance, 0.0) as distance, count(*) as tot, max(magnitudevalue)
            from event evt
            join geometry geo ON (event_id = evt.id)
            where inserted between '{_fmt_time(dt_start)}' AND now()
            and distance < {distance}
            group by 1,2
            order by 1
            """


def event_query(event, now):
    """Upsert statement of an event's own row."""
    eid = event.id
    description = event.description or ""
    category = event.categories[0].id
    closed = _fmt_time(event.closed or now)
    distance = _fmt_num(event.distance if event.distance is not None else 0.0)
    return f"""
            INSERT INTO event (id, title, description, link, category_id, closed, distance) VALUES ('{eid}', '{event.title}', '{description}', '{event.link}', '{category}', '{closed}', {distance})
            ON CONFLICT (id)
            DO UPDATE SET title = '{event.title}', description = '{description}', category_id = '{category}', link = '{event.link}', distance = {distance} WHERE event.id = '{eid}';"""


def geometry_query(geometry, event_id):
    """Upsert statement of one geometry of an event."""
    date = _fmt_time(geometry.date)
    x = _fmt_num(geometry.coordinates[0])
    y = _fmt_num(geometry.coordinates[1])
    magnitude = _fmt_num(geometry.magnitude_value if geometry.magnitude_value is not None else 1.0)
    unit = geometry.magnitude_unit or ""
    return f"""
            INSERT INTO geometry (dt, type, coordinates, event_id, magnitudevalue, magnitudeunit)
            VALUES ('{date}', '{geometry.type}', point({x}, {y}), '{event_id}', {magnitude}, '{unit}')
            ON CONFLICT (event_id, dt)
            DO UPDATE SET type = '{geometry.type}', coordinates = point({x}, {y}), magnitudevalue = {magnitude}, magnitudeunit = {magnitude}
            WHERE geometry.event_id = '{event_id}' AND geometry.dt = '{date}';"""


def source_queries(source_id, source_url, event_id):
    """Statements storing a source and linking it to an event."""
    source = f"""
            INSERT INTO source (id, url)
            VALUES ('{source_id}', '{source_url}')
            ON CONFLICT (id)
            DO NOTHING;"""
    link = f"""INSERT INTO event_source (source_id, event_id)
            VALUES('{source_id}', '{event_id}')
            ON CONFLICT (source_id, event_id)
            DO NOTHING;"""
    return source, link


@dataclass
class Pgdb:
    """Connection settings plus a DB-API connector taking a libpq connection string."""

    dburl: str
    dbport: int
    dbname: str
    dbuser: str
    dbpassword: str
    connector: object = field(default=None, repr=False, compare=False)

    def connect_string(self):
        """The libpq key/value connection string."""
        return (
            f"host={self.dburl} port={self.dbport} user={self.dbuser} "
            f"password={self.dbpassword} dbname={self.dbname}"
        )

    def _connect(self):
        if self.connector is None:
            raise DatabaseError("no database connector configured")
        try:
            return self.connector(self.connect_string())
        except DatabaseError:
            raise
        except Exception as exc:
            raise DatabaseError(str(exc)) from exc

    def _select(self, query):
        conn = self._connect()
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(query)
                return list(cursor.fetchall())
            except Exception as exc:
                raise DatabaseError(str(exc)) from exc
        finally:
            conn.close()

    def _insert(self, query):
        conn = self._connect()
        try:
            try:
                conn.cursor().execute(query)
                conn.commit()
            except Exception as exc:
                print(repr(exc), file=sys.stderr)
        finally:
            conn.close()

    def get_alert_events(self, dt_start, distance):
        """Summary message of recent events closer than `distance`."""
        rows = self._select(alert_events_query(dt_start, distance))
        return "".join(f"{row[2]} {row[0]}" for row in rows)

    def get_last_record(self):
        """Date of the latest logged feed call, or 90 days ago if none."""
        start = datetime.now(timezone.utc) - timedelta(days=90)
        for row in self._select("SELECT date FROM eonet_calls ORDER BY date DESC LIMIT 1"):
            stamp = row[0]
            start = stamp.replace(tzinfo=timezone.utc) if stamp.tzinfo is None else stamp.astimezone(timezone.utc)
        return start

    def check_connection(self):
        """Run a probe query; query failures are reported, not raised."""
        logthis("DB Check connection", "INFO")
        try:
            self._select("SELECT title FROM category WHERE id = 6")
        except DatabaseError as exc:
            print(repr(exc))

    def insert_full_event(self, event):
        """Store an event with its geometries and sources."""
        logthis("DB Insert or Update event", "INFO")
        self._insert(event_query(event, datetime.now(timezone.utc)))
        for geometry in event.geometry:
            self._insert(geometry_query(geometry, event.id))
        for source in event.sources:
            if source.id is None or source.url is None:
                raise DeserializationError("source without id or url")
            for query in source_queries(source.id, source.url, event.id):
                self._insert(query)

    def insert_call_log(self):
        """Record that the feed was called now."""
        self._insert("INSERT INTO public.eonet_calls(date, method) VALUES (now(), 'API');")