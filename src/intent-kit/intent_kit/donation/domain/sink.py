"""The host-supplied function that actually donates an item."""

from collections.abc import Awaitable, Callable
from typing import Any

type DonationSink = Callable[[Any], Awaitable[None]]
