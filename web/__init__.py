"""Web front end for the ATS CV Tailor."""
