"""
HotTakes API: Request Context
==============================

What:  Immutable per-request state produced by the pipeline stages.
How:   The authenticator creates RequestContext(user_id); the ownership
       check returns a copy carrying the loaded sauce. Stages receive the
       context as a parameter and return a new one, nothing is attached to
       the request object.
"""

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from hottakes.models.sauce import Sauce


@dataclass(frozen=True)
class RequestContext:
    user_id: str
    sauce: Optional["Sauce"] = None

    def with_sauce(self, sauce: "Sauce") -> "RequestContext":
        return replace(self, sauce=sauce)
