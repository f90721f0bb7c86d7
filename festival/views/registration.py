"""
Registration views for the festival.

- RegistrationView: participant form with session-backed draft and
  submission to the participant service
- discard_draft_view: throw away the stored draft

Features:
- Rate limiting to prevent abuse
- Draft kept in the session across failed attempts, so nothing typed is lost
- City list that never blocks the form (fallback list on any failure)
- Specific user feedback for timeouts, outages and server rejections
"""

from typing import Any

from django.contrib import messages
from django.http import HttpRequest, HttpResponse, HttpResponseRedirect
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.decorators import method_decorator
from django.views.decorators.http import require_POST
from django.views.generic import FormView
from django_ratelimit.decorators import ratelimit
from loguru import logger

from festival.drafts import ParticipantDraft, discard_draft, load_draft, save_draft
from festival.exceptions import SubmissionInProgressError
from festival.forms import ParticipantForm
from festival.services.participant_api import CityDirectory, CityList
from festival.services.submission_service import (
    SubmissionCoordinator,
    SubmissionStatus,
)

IN_PROGRESS_MESSAGE = "Sua inscrição já está sendo enviada. Aguarde."
SUCCESS_MESSAGE = "Inscrição realizada com sucesso!"


@method_decorator(ratelimit(key="ip", rate="10/h", method="POST"), name="post")
class RegistrationView(FormView):
    """
    Participant registration form.

    Workflow:
    1. GET: load cities, re-open the stored draft (if any)
    2. POST: store the typed values as the draft, validate the form
    3. Valid form: hand the draft to SubmissionCoordinator
    4. ACCEPTED: discard the draft, redirect to the WhatsApp groups page
    5. Anything else: re-render the form with the draft intact

    Note:
        - Rate limited to 10 POST requests per hour per IP
        - A second POST while a submission is in flight is refused
    """

    template_name = "festival/register.html"
    form_class = ParticipantForm

    def dispatch(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        self.draft = load_draft(request.session)
        self.cities: CityList = CityDirectory().load()
        return super().dispatch(request, *args, **kwargs)

    def get_initial(self) -> dict[str, Any]:
        return ParticipantForm.initial_from_draft(self.draft)

    def get_form_kwargs(self) -> dict[str, Any]:
        kwargs = super().get_form_kwargs()
        kwargs["cities"] = self.cities
        kwargs["draft_id"] = self.draft.draft_id
        return kwargs

    def get_success_url(self) -> str:
        return reverse("festival:whatsapp_groups")

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        context["cities_from_fallback"] = self.cities.from_fallback
        form = context.get("form")
        context["age_result"] = getattr(form, "age_result", None)
        return context

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        # Keep what was typed, valid or not
        typed = {
            name: request.POST.get(name, "")
            for name in ParticipantDraft.field_names()
            if name != "regulation_accepted"
        }
        typed["regulation_accepted"] = request.POST.get("regulation_accepted") in (
            "on",
            "true",
            "1",
        )
        self.draft = self.draft.update_many(typed)
        save_draft(request.session, self.draft)
        return super().post(request, *args, **kwargs)

    def form_valid(self, form: ParticipantForm) -> HttpResponse:
        draft = form.to_draft()
        self.draft = draft
        save_draft(self.request.session, draft)

        logger.info(f"Processing registration for draft {draft.draft_id}")

        try:
            outcome = SubmissionCoordinator().submit(draft)
        except SubmissionInProgressError:
            messages.warning(self.request, IN_PROGRESS_MESSAGE)
            return self.form_invalid(form)

        if outcome.status == SubmissionStatus.ACCEPTED:
            discard_draft(self.request.session)
            messages.success(self.request, outcome.message or SUCCESS_MESSAGE)
            return HttpResponseRedirect(self.get_success_url())

        if outcome.status == SubmissionStatus.INVALID:
            for field_name, errors in outcome.errors.items():
                for error in errors:
                    form.add_error(field_name, error)
            return self.form_invalid(form)

        if outcome.status == SubmissionStatus.REJECTED and outcome.server_message:
            messages.error(self.request, f"{outcome.message} {outcome.server_message}")
        else:
            messages.error(self.request, outcome.message)

        return self.form_invalid(form)

    def form_invalid(self, form: ParticipantForm) -> HttpResponse:
        """Re-render the form; the draft stays stored in the session."""
        logger.debug(f"Registration form re-rendered with errors: {list(form.errors)}")
        return super().form_invalid(form)


@require_POST
def discard_draft_view(request: HttpRequest) -> HttpResponse:
    """Throw away the stored draft and reopen an empty form."""
    discard_draft(request.session)
    messages.info(request, "Formulário limpo.")
    return redirect("festival:register")
