import logging
from typing import Dict, Optional

from pydantic import ValidationError

from grouphub.actions import GroupActions
from grouphub.hooks.base_hook import Hook
from grouphub.models.data import ActionResult, DomainConfig
from grouphub.models.forms import AddCustomDomainForm, form_errors
from grouphub.notifications import Toaster
from grouphub.query import Mutation, Query, QueryClient

logger = logging.getLogger(__name__)

DOMAIN_CONFIG_KEY = ("domain-config",)


class CustomDomain(Hook):
    """
    Custom domain settings for a group.

    Adding a domain never patches the cached config. Whatever the outcome,
    the config query is invalidated afterwards and fetched again.
    """

    name = "custom-domain"

    def __init__(self, actions: GroupActions, queries: QueryClient, toaster: Toaster, group_id: str):
        super().__init__()
        self.actions = actions
        self.queries = queries
        self.toaster = toaster
        self.group_id = group_id
        self.values: Dict[str, str] = {"domain": ""}
        self.errors: Dict[str, str] = {}
        self.query: Optional[Query] = None
        self.mutation = Mutation(
            "add-custom-domain",
            self._add,
            on_mutate=self.reset,
            on_success=self._on_success,
            on_settled=self._on_settled,
        )

    @property
    def is_pending(self) -> bool:
        return self.mutation.is_pending

    @property
    def config(self) -> Optional[DomainConfig]:
        if self.query is None or self.query.data is None:
            return None
        return self.query.data.domain

    async def on_mount(self):
        self.query = self.queries.use_query(DOMAIN_CONFIG_KEY, lambda: self.actions.get_domain_config(self.group_id))
        await self.query.fetch()

    def reset(self, *_):
        self.values = {"domain": ""}

    async def add_domain(self, domain: Optional[str] = None) -> Optional[ActionResult]:
        try:
            form = AddCustomDomainForm(domain=self.values["domain"] if domain is None else domain)
        except ValidationError as e:
            self.errors = form_errors(e)
            return None
        self.errors = {}
        return await self.mutation.mutate(form.domain)

    async def _add(self, domain: str) -> ActionResult:
        return await self.actions.add_custom_domain(self.group_id, domain)

    def _on_success(self, result: ActionResult):
        self.toaster.toast("Success" if result.ok else "Error", result.message or "")

    async def _on_settled(self):
        if self.scope.closed:
            return
        await self.queries.invalidate_queries(DOMAIN_CONFIG_KEY)
