"""Dry-sync of the default-locale hierarchy with the hierarchy service.

Failure policy: any exception raised while calling the service or reading its
answer turns into a passing result for the requested locale. A service outage
must not block documentation builds. The price is that errors on the service
side are reported as "valid"; callers that need strict validation should call
``try_drysync`` and inspect the ``Err`` outcome themselves.
"""

import logging
import time
from dataclasses import dataclass

from pydantic import TypeAdapter

from hierval.constants import DEFAULT_LOCALE, PLUGIN_NAME
from hierval.errors import ServiceError
from hierval.models.hierarchy import RawHierarchy
from hierval.models.sync import DrySyncMessage, ValidationResult
from hierval.sync.accessor import LearnServiceAccessor

logger = logging.getLogger(__name__)

_RESULTS_ADAPTER = TypeAdapter(list[ValidationResult])


@dataclass(frozen=True)
class Ok:
    """The service answered with a result for the default locale."""
    value: ValidationResult


@dataclass(frozen=True)
class Err:
    """The call or its response handling raised."""
    error: Exception


SyncOutcome = Ok | Err


def fallback_result(branch: str, locale: str) -> ValidationResult:
    """Result substituted for a failed call: valid, empty message."""
    return ValidationResult(branch=branch, locale=locale, is_valid=True, message="")


def select_default_locale(results: list[ValidationResult]) -> ValidationResult:
    """Pick the default-locale entry out of the per-locale results.

    Raises:
        ServiceError: If the service returned no default-locale entry
    """
    for result in results:
        if result.locale and result.locale.lower() == DEFAULT_LOCALE:
            return result
    locales = ", ".join(result.locale for result in results) or "none"
    raise ServiceError(f"Dry-sync response has no '{DEFAULT_LOCALE}' result (got: {locales})")


class DrySyncClient:
    """Sends candidate hierarchies to the service without committing them."""

    def __init__(self, accessor: LearnServiceAccessor):
        self.accessor = accessor

    def drysync(
        self,
        branch: str,
        locale: str,
        docset_name: str,
        repo_url: str,
        hierarchy: RawHierarchy,
    ) -> ValidationResult:
        """Perform the call. Raises on any failure."""
        body = DrySyncMessage(
            hierarchy=hierarchy,
            locale=locale,
            branch=branch,
            docset_name=docset_name,
            repo_url=repo_url,
        ).to_json()

        logger.info(f"[{PLUGIN_NAME}] start to call dry-sync...")
        started = time.perf_counter()

        data = self.accessor.hierarchy_drysync(body)
        results = _RESULTS_ADAPTER.validate_json(data)
        logger.info(f"[{PLUGIN_NAME}] dry-sync done in {time.perf_counter() - started:.1f}s")

        return select_default_locale(results)

    def try_drysync(
        self,
        branch: str,
        locale: str,
        docset_name: str,
        repo_url: str,
        hierarchy: RawHierarchy,
    ) -> SyncOutcome:
        """Perform the call and return the outcome instead of raising."""
        try:
            return Ok(self.drysync(branch, locale, docset_name, repo_url, hierarchy))
        except Exception as e:
            return Err(e)

    def sync(
        self,
        branch: str,
        locale: str,
        docset_name: str,
        repo_url: str,
        hierarchy: RawHierarchy,
    ) -> ValidationResult:
        """Dry-sync with the fail-open policy applied.

        Returns:
            The service's result, or a passing fallback result if the call failed
        """
        outcome = self.try_drysync(branch, locale, docset_name, repo_url, hierarchy)
        if isinstance(outcome, Ok):
            return outcome.value

        logger.warning(
            f"[{PLUGIN_NAME}] exception occurs during dry sync step, treating hierarchy as valid: "
            f"{type(outcome.error).__name__}: {outcome.error}"
        )
        return fallback_result(branch, locale)
