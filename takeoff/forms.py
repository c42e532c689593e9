from django import forms

from .models import Plan


class PlanUploadForm(forms.ModelForm):
    class Meta:
        model = Plan
        fields = ["name", "file", "document_type"]

    def clean_file(self):
        upload = self.cleaned_data.get("file")
        if not upload:
            raise forms.ValidationError("A PDF file is required.")
        if not upload.name.lower().endswith(".pdf"):
            raise forms.ValidationError("Only PDF files are supported.")
        return upload
