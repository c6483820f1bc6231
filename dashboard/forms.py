from django import forms

from updates.models import Update


class UpdateForm(forms.ModelForm):
    github_issue_link = forms.URLField(
        label="GitHub Issue Link",
        max_length=500,
        required=False,
        assume_scheme="https",
    )

    class Meta:
        model = Update
        fields = [
            "employee_name",
            "date",
            "updates",
            "github_issue_link",
            "issue_description",
            "build_number",
            "issue_status",
        ]
        labels = {
            "employee_name": "Employee Name",
            "updates": "Updates",
            "github_issue_link": "GitHub Issue Link",
            "issue_description": "Issue Description",
            "build_number": "Build Number",
            "issue_status": "Issue Status",
        }
        help_texts = {
            "updates": "One update per line.",
        }
        widgets = {
            "date": forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d"),
            "updates": forms.Textarea(attrs={"rows": 6, "placeholder": "Type each update on its own line"}),
            "issue_description": forms.Textarea(attrs={"rows": 3}),
        }

    def clean_updates(self):
        text = self.cleaned_data.get("updates", "")
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        if not lines:
            raise forms.ValidationError("Please add at least one update.")
        return "\n".join(lines)


class DashboardFilterForm(forms.Form):
    start = forms.DateField(
        label="Start Date",
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    end = forms.DateField(
        label="End Date",
        required=False,
        widget=forms.DateInput(attrs={"type": "date"}),
    )
    employee = forms.CharField(
        label="Filter by Employee",
        required=False,
        widget=forms.TextInput(attrs={"placeholder": "Employee name"}),
    )

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("start"), cleaned.get("end")
        if start and end and start > end:
            raise forms.ValidationError("Start date must be on or before end date.")
        return cleaned
