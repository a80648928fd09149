"""Default expense categories for a marketing agency, as (code, name, group)"""

DEFAULT_EXPENSE_CATEGORIES = [
    ('RENT', 'Office Rent / Co-working', 'Operations'),
    ('UTIL', 'Utilities (Electricity, Internet, Water)', 'Operations'),
    ('SOFTWARE', 'Software & Subscriptions', 'Operations'),
    ('HOSTING', 'Hosting / Domains', 'Operations'),
    ('EQUIP', 'Equipment & Maintenance', 'Operations'),
    ('SUPPLIES', 'Office Supplies', 'Operations'),

    ('ADS', 'Advertising (Meta / Google / Others)', 'Marketing & Sales'),
    ('LEADGEN', 'Lead Generation Tools', 'Marketing & Sales'),
    ('CRM', 'CRM / Automation Tools', 'Marketing & Sales'),
    ('BRANDING', 'Branding & Creative Assets', 'Marketing & Sales'),
    ('EVENTS', 'Events / Webinars / Sponsorships', 'Marketing & Sales'),

    ('SALARY', 'Salaries / Stipends', 'Team & HR'),
    ('FREELANCE', 'Freelancer / Contractor Payouts', 'Team & HR'),
    ('HIRING', 'Hiring & Onboarding', 'Team & HR'),
    ('TRAINING', 'Training / Courses', 'Team & HR'),
    ('WELFARE', 'Employee Welfare', 'Team & HR'),

    ('OUTSOURCE', 'Outsourced Work', 'Client Project Costs'),
    ('ASSETS', 'Paid Assets (Stock images, Videos, Templates)', 'Client Project Costs'),
    ('MEDIABUY', 'Media Buying for Clients', 'Client Project Costs'),
    ('PROJTOOLS', 'Project Tools / Integrations', 'Client Project Costs'),

    ('ACCOUNT', 'CA / Accounting Fees', 'Finance & Legal'),
    ('LEGAL', 'Legal & Compliance', 'Finance & Legal'),
    ('BANKFEES', 'Bank Charges / Payment Gateway Fees', 'Finance & Legal'),
    ('TAXES', 'Taxes & GST', 'Finance & Legal'),

    ('TRAVEL', 'Travel (Local & Outstation)', 'Travel & Communication'),
    ('FUEL', 'Fuel / Vehicle Maintenance', 'Travel & Communication'),
    ('FOOD', 'Food & Meetings', 'Travel & Communication'),
    ('PHONE', 'Phone Bills', 'Travel & Communication'),

    ('CONTING', 'Contingency', 'Miscellaneous'),
    ('REFUNDS', 'Refunds / Adjustments', 'Miscellaneous'),
    ('CSR', 'Donations / CSR', 'Miscellaneous'),
]
