"""
Option catalogues for the application form.
Values are what the form submits; labels are what the applicant sees.
"""

BUSINESS_CATEGORIES = [
    "Food & Beverage",
    "Technology",
    "App / Website",
    "Agriculture / Agritech",
    "Health / Wellness",
    "Fitness",
    "Education / Edtech",
    "Beauty",
    "Clothing / Fashion",
    "Entertainment",
    "Financial Services / Fintech",
    "Transportation / Logistics",
    "Energy / CleanTech",
    "Manufacturing",
    "Other",
]

BUSINESS_PHASES = [
    {"value": "idea", "label": "Idea Stage"},
    {"value": "research", "label": "Research & Development"},
    {"value": "prototype", "label": "Prototype / Beta Testing"},
    {"value": "crowdfunding", "label": "Crowdfunding"},
    {"value": "operating", "label": "Operating / Revenue Generating"},
]

REGIONS = [
    "Greater Accra",
    "Ashanti",
    "Western",
    "Central",
    "Eastern",
    "Volta",
    "Northern",
    "Upper East",
    "Upper West",
    "Brong-Ahafo",
    "Western North",
    "Ahafo",
    "Bono East",
    "Oti",
    "Savannah",
    "North East",
]

PRONOUN_OPTIONS = [
    {"value": "he/him", "label": "He/Him"},
    {"value": "she/her", "label": "She/Her"},
    {"value": "they/them", "label": "They/Them"},
    {"value": "prefer-not", "label": "Prefer not to say"},
    {"value": "other", "label": "Other"},
]

COLLABORATOR_OPTIONS = [
    {"value": "no", "label": "No, I'm applying alone"},
    {"value": "yes", "label": "Yes, with co-founders"},
]


def option_values(options):
    """Return the submitted values of a value/label catalogue"""
    return [option["value"] for option in options]


def all_options():
    """Every catalogue, keyed the way the form fields are named"""
    return {
        "categories": BUSINESS_CATEGORIES,
        "phases": BUSINESS_PHASES,
        "regions": REGIONS,
        "pronouns": PRONOUN_OPTIONS,
        "collaborators": COLLABORATOR_OPTIONS,
    }
