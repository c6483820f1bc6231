import logging

from django.contrib import messages
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from dashboard.forms import DashboardFilterForm, UpdateForm
from updates.models import Update
from updates.services import change_update, create_update, delete_update, get_update, list_updates

logger = logging.getLogger(__name__)


def _get_or_404(pk):
    try:
        return get_update(pk)
    except Update.DoesNotExist as exc:
        raise Http404("Update not found") from exc


def dashboard(request):
    """Daily updates dashboard with date-range and employee filters."""
    form = DashboardFilterForm(request.GET or None)
    if form.is_valid():
        filters = form.cleaned_data
    elif form.is_bound:
        # Keep the filters that did validate; an inverted range is dropped.
        filters = {name: value for name, value in form.cleaned_data.items() if name not in form.errors}
        if form.non_field_errors():
            filters.pop("start", None)
            filters.pop("end", None)
    else:
        filters = {}

    entries = list_updates(
        start=filters.get("start"),
        end=filters.get("end"),
        employee=filters.get("employee", "").strip(),
    )
    return render(request, "dashboard/dashboard.html", {"form": form, "entries": entries})


def add_update(request):
    form = UpdateForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        create_update(form.cleaned_data)
        messages.success(request, "Update added.")
        return redirect("dashboard:index")
    return render(request, "dashboard/update_form.html", {"form": form, "editing": False})


def edit_update(request, pk):
    entry = _get_or_404(pk)
    form = UpdateForm(request.POST or None, instance=entry)
    if request.method == "POST" and form.is_valid():
        # The form only carries the editable columns, so hand the service exactly those.
        changes = {name: form.cleaned_data[name] for name in form.Meta.fields}
        try:
            change_update(pk, changes)
        except Update.DoesNotExist as exc:
            raise Http404("Update not found") from exc
        messages.success(request, "Update saved.")
        return redirect("dashboard:index")
    return render(request, "dashboard/update_form.html", {"form": form, "editing": True, "entry": entry})


@require_POST
def remove_update(request, pk):
    if not delete_update(pk):
        raise Http404("Update not found")
    messages.success(request, "Update deleted.")
    return redirect("dashboard:index")
