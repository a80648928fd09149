"""Default job roles for a marketing agency, as (title, department, description)"""

DEFAULT_JOB_ROLES = [
    ('CEO / Managing Director', 'Leadership', 'Leads the agency'),
    ('COO', 'Leadership', 'Manages operations'),
    ('CFO', 'Leadership', 'Manages finances'),
    ('Creative Director', 'Creative', 'Leads creative vision and oversees all creative output'),
    ('Art Director', 'Creative', 'Manages visual aspects of campaigns and designs'),
    ('Account Director', 'Account Management', 'Senior client relationship manager'),
    ('Account Manager', 'Account Management', 'Manages client relationships and projects'),
    ('Account Executive', 'Account Management', 'Supports account management and client communication'),
    ('Project Manager', 'Project Management', 'Oversees project timelines and deliverables'),
    ('Project Coordinator', 'Project Management', 'Assists with project scheduling and coordination'),
    ('Brand Strategist', 'Strategy', 'Develops brand positioning and strategy'),
    ('Content Strategist', 'Strategy', 'Develops content strategies and editorial calendars'),
    ('Copywriter', 'Creative', 'Creates written content for campaigns'),
    ('Content Writer', 'Creative', 'Writes blog posts, articles and web content'),
    ('Graphic Designer', 'Design', 'Creates visual designs for digital and print media'),
    ('UI/UX Designer', 'Design', 'Designs user interfaces and experiences'),
    ('Motion Graphics Designer', 'Design', 'Creates animated and video content'),
    ('Video Editor', 'Production', 'Edits and post-produces video content'),
    ('Photographer', 'Production', 'Captures professional photography for campaigns'),
    ('Digital Marketing Manager', 'Digital Marketing', 'Manages digital marketing strategies and campaigns'),
    ('Performance Marketing Manager', 'Digital Marketing', 'Manages paid acquisition campaigns'),
    ('SEO Specialist', 'Digital Marketing', 'Improves organic search visibility'),
    ('Social Media Manager', 'Digital Marketing', 'Runs social media channels and communities'),
    ('Web Developer', 'Technology', 'Builds and maintains websites'),
    ('HR Manager', 'Operations', 'Handles hiring, onboarding and people operations'),
    ('Accountant', 'Operations', 'Maintains books and statutory filings'),
    ('Intern', 'General', 'Trainee across departments'),
]
