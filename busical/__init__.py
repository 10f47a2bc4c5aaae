import io
from datetime import timedelta

from flask import Flask, jsonify, request, send_file

from .config import BusiCalConfig
from .crypto.fingerprint import LocalDeviceProfile
from .ingestion.feed_client import ProxyFeedClient
from .ingestion.service import CalendarService
from .output.calendar_links import CalendarPlatform, calendar_link
from .output.ics_writer import ICSWriter
from .processing.privacy import sanitize
from .storage.email_history import EmailHistory, is_valid_email
from .storage.event_cache import EventCache
from .storage.key_value import JsonFileKeyValueStore, KeyValueStore
from .storage.url_store import EncryptedUrlStore


def setup_storage(config: BusiCalConfig) -> KeyValueStore:
    """Key-value storage backed by the configured JSON file."""
    return JsonFileKeyValueStore(config.storage_path)


def setup_calendar_service(
    config: BusiCalConfig, kv: KeyValueStore | None = None
) -> CalendarService:
    """Wire the calendar service with its default collaborators."""
    kv = kv or setup_storage(config)
    return CalendarService(
        url_store=EncryptedUrlStore(kv, device=LocalDeviceProfile(config)),
        feed_client=ProxyFeedClient(config),
        cache=EventCache(kv, stale_after=timedelta(hours=config.stale_after_hours)),
    )


def create_app(
    service: CalendarService | None = None,
    email_history: EmailHistory | None = None,
):
    config = BusiCalConfig.from_env()
    if service is None:
        kv = setup_storage(config)
        service = setup_calendar_service(config, kv)
        email_history = email_history or EmailHistory(kv, config.email_history_limit)
    elif email_history is None:
        email_history = EmailHistory(service.cache.kv, config.email_history_limit)

    app = Flask(__name__)
    writer = ICSWriter()

    @app.route("/events", methods=["GET"])
    def list_events():
        """Serve cached events, optionally for one week."""
        record = service.cached()
        if record is None:
            return jsonify({"events": [], "last_fetch": None, "calendar_last_updated": None, "is_stale": False})

        week = request.args.get("week", type=int)
        events = record.events if week is None else service.events_for_week(week)

        return jsonify(
            {
                "events": [event.model_dump(mode="json") for event in events],
                "last_fetch": record.last_fetch.isoformat(),
                "calendar_last_updated": (
                    record.calendar_last_updated.isoformat()
                    if record.calendar_last_updated
                    else None
                ),
                "is_stale": service.cache.is_stale(record),
            }
        )

    @app.route("/events/<path:event_id>/links/<provider>", methods=["GET"])
    def event_link(event_id, provider):
        """Deep link that adds the sanitized event to a provider calendar."""
        event = service.find_event(event_id)
        if event is None:
            return ("Event not found", 404)

        if provider not in (CalendarPlatform.GOOGLE.value, CalendarPlatform.OUTLOOK.value):
            return (f"Unsupported provider: {provider}", 400)

        email = request.args.get("email") or None
        if email and is_valid_email(email):
            email_history.add(provider, email)

        url = calendar_link(provider, sanitize(event), email)
        return jsonify({"url": url})

    @app.route("/events/<path:event_id>/download", methods=["GET"])
    def download_event(event_id):
        """Serve the sanitized event as an ICS file."""
        event = service.find_event(event_id)
        if event is None:
            return ("Event not found", 404)

        download = writer.build_download(
            sanitize(event), filename=request.args.get("filename") or None
        )
        return send_file(
            io.BytesIO(download.to_bytes()),
            mimetype=download.mime_type,
            as_attachment=True,
            download_name=download.filename,
        )

    return app
