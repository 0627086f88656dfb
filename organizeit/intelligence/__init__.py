"""OrganizeIT intelligence layer -- metrics cache, chat assistant, alert lifecycle and domain services."""
