"""
Network module for Segment Clock
HTTP GET collaborator for the timezone lookups, built on adafruit_requests.

Bringing the network link up is left to the operating system; this module
only needs a working socket layer.
"""

import socket
import ssl

import adafruit_requests as requests

import config
import logger


# ===========================
# GLOBAL SESSION MANAGEMENT
# ===========================

# Session created ONCE and reused for every lookup
_global_session = None


def get_requests_session():
	"""
	Get or create the global requests session.

	Returns:
		adafruit_requests.Session: Global session instance or None if creation fails
	"""
	global _global_session

	if _global_session is None:
		try:
			_global_session = requests.Session(socket, ssl.create_default_context())
			logger.log("Created global requests session", config.LogLevel.DEBUG)
		except (OSError, RuntimeError, ValueError) as e:
			logger.log(f"Failed to create session: {e}", config.LogLevel.ERROR)
			return None

	return _global_session


def cleanup_global_session():
	"""Drop the global session so the next request builds a fresh one"""
	global _global_session

	if _global_session is not None:
		logger.log("Destroying global session", config.LogLevel.DEBUG)
		_global_session = None


# ===========================
# HTTP CLIENT
# ===========================

class HttpClient:
	"""
	Blocking GET with a bounded timeout.

	Args:
		session: adafruit_requests.Session (default: the global session)
		timeout (float): Request timeout in seconds
	"""

	def __init__(self, session=None, timeout=None):
		self.session = session
		self._owns_session = session is None
		self.timeout = config.Env.HTTP_TIMEOUT if timeout is None else timeout

		# Request statistics
		self.requests_total = 0
		self.requests_failed = 0

	def _session(self):
		if self.session is None:
			self.session = get_requests_session()
		return self.session

	def get(self, url):
		"""
		Fetch url.

		Args:
			url (str): Address to fetch

		Returns:
			tuple: (status, body); (0, "") when no response arrived
		"""
		self.requests_total += 1
		logger.log(f"HTTP Request: {url}", config.LogLevel.DEBUG)

		session = self._session()
		if session is None:
			self.requests_failed += 1
			return 0, ""

		response = None
		try:
			response = session.get(url, timeout=self.timeout)
			status = response.status_code
			body = response.text
		except (OSError, RuntimeError, ValueError) as e:
			self.requests_failed += 1
			logger.log(f"HTTP error for {url}: {type(e).__name__}: {e}", config.LogLevel.WARNING)
			# A broken socket can poison the session, start over next time
			if self._owns_session:
				cleanup_global_session()
				self.session = None
			return 0, ""
		finally:
			# Always close response to release the socket
			if response is not None:
				try:
					response.close()
				except (OSError, RuntimeError):
					pass

		logger.log(f"HTTP Response code: {status}", config.LogLevel.DEBUG)
		return status, body

	def __call__(self, url):
		return self.get(url)

	def get_stats(self):
		"""
		Get request statistics.

		Returns:
			str: Human-readable request statistics
		"""
		ok = self.requests_total - self.requests_failed
		return f"HTTP: {self.requests_total} requests, {ok} answered, {self.requests_failed} failed"
