"""Forms for blog_relations."""
from django import forms

from .models import Redirect
from .validators import NoRedirectLoopValidator, NotSelfRedirectValidator


class RedirectForm(forms.ModelForm):
    """Redirect form that refuses self-redirects and loops."""

    class Meta:
        model = Redirect
        fields = ["source_url", "target_url", "status_code", "is_active", "is_automatic"]

    def clean(self):
        cleaned_data = super().clean()
        source_url = cleaned_data.get("source_url")
        target_url = cleaned_data.get("target_url")

        if not source_url or not target_url:
            return cleaned_data

        validators = [NotSelfRedirectValidator(source_url)]
        # Inactive redirects never fire, so they cannot loop
        if cleaned_data.get("is_active"):
            validators.append(NoRedirectLoopValidator(source_url, self.instance.pk))

        for validator in validators:
            try:
                validator(target_url)
            except forms.ValidationError as exc:
                self.add_error("target_url", exc)
                break

        return cleaned_data
