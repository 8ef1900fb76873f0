"""
Segment Clock - Timezone Module
Automatic timezone selection by geo locating the external address.

1. Get the external router address.
2. Look up the timezone of this address.
3. Look up the POSIX TZ definition (offset and DST rules) for that zone.

The result is applied to the process (TZ + tzset) and persisted, so later
boots skip the network entirely. Failures are never raised: the resolver
stays unresolved, formatting keeps using UTC0, and the orchestrator tries
again at the next minute boundary.
"""

import csv
import io
import json
import os
import time

import config
import logger
from state import TimezoneState, TimezoneStatus

# ============================================================================
# PROCESS TIMEZONE
# ============================================================================

def apply_posix_timezone(posix_definition):
    """
    Switch local time formatting of this process to a POSIX TZ definition.

    Args:
        posix_definition (str): e.g. "CET-1CEST,M3.5.0,M10.5.0/3"
    """
    logger.log(f"Setting timezone to {posix_definition}", config.LogLevel.DEBUG)
    os.environ["TZ"] = posix_definition
    time.tzset()

# ============================================================================
# RESPONSE PARSING
# ============================================================================

def extract_quoted_after(text, marker):
    """
    Read the text after marker up to the next double quote.

    Args:
        text (str): Response body
        marker (str): Literal prefix, e.g. '"timeZone":"'

    Returns:
        str: Value between marker and the closing quote, or None if either is missing
    """
    start = text.find(marker)
    if start == -1:
        return None
    start += len(marker)
    end = text.find('"', start)
    if end == -1:
        return None
    return text[start:end]


def find_timezone_name(body, field=config.Strings.TIMEZONE_JSON_FIELD):
    """
    Extract the IANA zone name from the timezone-by-address response.

    The body is parsed as JSON first and a top level field wins. Otherwise
    (nested objects, truncated or odd responses) the literal '"timeZone":"'
    scan is used, so any body carrying the field still resolves.

    Args:
        body (str): Response body, e.g. '{"timeZone":"Europe/Berlin", ...}'
        field (str): JSON field holding the zone name

    Returns:
        str: Zone name, or None when the field is missing or empty
    """
    if not body:
        return None

    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        name = data.get(field)
        if isinstance(name, str) and name:
            return name

    # Nested or unusual layouts still carry the literal field somewhere
    name = extract_quoted_after(body, f'"{field}":"')
    return name or None


def find_posix_definition(csv_body, zone_name, default=config.Strings.DEFAULT_POSIX_TZ):
    """
    Find the POSIX definition of a zone in the zones CSV.

    Rows look like: "Europe/Berlin","CET-1CEST,M3.5.0,M10.5.0/3"

    Args:
        csv_body (str): Whole CSV document
        zone_name (str): IANA zone name to look for
        default (str): Returned when no row matches

    Returns:
        str: POSIX TZ definition
    """
    for row in csv.reader(io.StringIO(csv_body)):
        if len(row) >= 2 and row[0] == zone_name and row[1]:
            return row[1]
    return default

# ============================================================================
# RESOLVER
# ============================================================================

class TimezoneResolver:
    """
    Resolves, applies and persists the local POSIX timezone.

    Args:
        http_get: Callable url -> (status, body), must honour a timeout
        store: Key-value store with get(key) / put(key, value)
        timezone_state (TimezoneState): State to update (shared with the context)
        apply_timezone: Callable applying a POSIX definition to the process
    """

    def __init__(self, http_get, store, timezone_state=None, apply_timezone=apply_posix_timezone):
        self.http_get = http_get
        self.store = store
        self.state = timezone_state if timezone_state is not None else TimezoneState()
        self.apply_timezone = apply_timezone

        self.attempts = 0
        self.failures = 0

    @property
    def resolved(self):
        return self.state.resolved

    # ------------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------------

    def load_persisted(self):
        """
        Apply a stored POSIX definition without touching the network.

        Returns:
            str: The stored definition, or None when nothing was stored
                 (UTC0 is applied in that case)
        """
        try:
            stored = self.store.get(config.Storage.TIMEZONE_KEY)
        except (OSError, ValueError) as e:
            logger.log(f"Timezone store read failed: {e}", config.LogLevel.WARNING)
            stored = None

        if not isinstance(stored, str) or not stored:
            logger.log("No stored timezone, using UTC0 until resolved", config.LogLevel.INFO)
            self._apply(self.state.posix_definition)
            return None

        self.state.posix_definition = stored
        self.state.status = TimezoneStatus.RESOLVED
        self._apply(stored)
        logger.log(f"Timezone loaded from store: {stored}", config.LogLevel.INFO)
        return stored

    # ------------------------------------------------------------------------
    # Network resolution
    # ------------------------------------------------------------------------

    def attempt_resolve(self):
        """
        Run the lookup chain once.

        Returns:
            bool: True when the timezone is resolved (now or already before)
        """
        if self.state.resolved:
            logger.log("Timezone already resolved, skipping lookup", config.LogLevel.DEBUG)
            return True

        self.attempts += 1
        self.state.status = TimezoneStatus.RESOLVING

        posix_definition = None
        zone_name = None
        try:
            zone_name = self._lookup_zone_name()
            if zone_name:
                posix_definition = self._lookup_posix_definition(zone_name)
        finally:
            if posix_definition is None:
                self.state.status = TimezoneStatus.UNRESOLVED

        if posix_definition is None:
            self.failures += 1
            logger.log(f"Timezone lookup failed (attempt {self.attempts}), keeping "
                       f"{self.state.posix_definition}", config.LogLevel.WARNING)
            return False

        self.state.iana_name = zone_name
        self.state.posix_definition = posix_definition
        self._apply(posix_definition)
        self._persist(posix_definition)
        self.state.status = TimezoneStatus.RESOLVED

        logger.log_resolution(self.state)
        return True

    def _lookup_zone_name(self):
        logger.log("Get external IP", config.LogLevel.DEBUG)
        address = self._fetch(config.API.EXTERNAL_IP_URL, "External IP").strip()
        if not address:
            return None
        logger.log(f"External IP is {address}", config.LogLevel.DEBUG)

        body = self._fetch(config.API.TIMEZONE_BY_IP_URL.format(address=address), "Timezone by IP")
        zone_name = find_timezone_name(body)
        if not zone_name:
            if body:
                logger.log("Timezone by IP: no timeZone field in response", config.LogLevel.WARNING)
            return None
        return zone_name

    def _lookup_posix_definition(self, zone_name):
        body = self._fetch(config.API.POSIX_ZONES_CSV_URL, "Zones CSV")
        if not body:
            return None

        try:
            posix_definition = find_posix_definition(body, zone_name)
        except csv.Error as e:
            logger.log(f"Zones CSV unreadable: {e}", config.LogLevel.WARNING)
            return None

        if posix_definition == config.Strings.DEFAULT_POSIX_TZ:
            logger.log(f"No POSIX definition for {zone_name}, using UTC0", config.LogLevel.WARNING)
        return posix_definition

    def _fetch(self, url, context):
        """
        GET url; anything but a 2xx answer with a body counts as empty.

        Returns:
            str: Response body or ""
        """
        try:
            status, body = self.http_get(url)
        except Exception as e:
            logger.log(f"{context}: request error {type(e).__name__}: {e}", config.LogLevel.WARNING)
            return ""

        if not config.API.HTTP_OK_MIN <= status <= config.API.HTTP_OK_MAX:
            logger.log(f"{context}: HTTP {status}", config.LogLevel.WARNING)
            return ""
        return body or ""

    # ------------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------------

    def _apply(self, posix_definition):
        try:
            self.apply_timezone(posix_definition)
        except (OSError, AttributeError, ValueError) as e:
            logger.log(f"Could not apply timezone {posix_definition}: {e}", config.LogLevel.ERROR)

    def _persist(self, posix_definition):
        try:
            self.store.put(config.Storage.TIMEZONE_KEY, posix_definition)
        except (OSError, ValueError) as e:
            # Still resolved for this run, the next boot simply looks it up again
            logger.log(f"Could not persist timezone: {e}", config.LogLevel.WARNING)
