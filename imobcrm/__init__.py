"""ImobCRM - CRM de imobiliária."""

__version__ = "0.1.0"
