# portfolio/data/profile.py
# Static site content. The chat system instruction is built from this once at import.

PERSONAL_INFO = {
    "name": "Arun Sundararajan",
    "title": "Product Manager",
    "email": "arunsunderraj@outlook.com",
    "location": "Bengaluru, Karnataka",
    "bio": (
        "I'm a Product Manager with a strong technical background and over ten years of experience "
        "working on data platforms. I enjoy understanding how systems break in the real world and "
        "turning those lessons into better product decisions."
    ),
    "bioExtended": [
        "At Hevo, I work on improving connector reliability, authentication flows, and onboarding across "
        "modern data stacks. My work touches platforms like Snowflake, Salesforce, HubSpot, NetSuite, and PostgreSQL.",
        "I like collaborating closely with engineers to shape ideas into simple, maintainable solutions. "
        "I'm naturally analytical and spend a lot of time thinking about edge cases and long-term scalability.",
        "My background in support helps me stay grounded in real user problems. I care about building "
        "products that are reliable, understandable, and easy to trust.",
    ],
    "socialLinks": {
        "github": "https://github.com/legolasan",
        "linkedin": "https://linkedin.com/in/arunsunderraj",
        "email": "mailto:arunsunderraj@outlook.com",
    },
}

PROJECTS = [
    {
        "id": "1",
        "title": "Customer Session Analyser",
        "description": "Record keeping for all the customer interactions with the product and making insights out of it.",
        "technologies": ["Python", "Flask", "PostgreSQL", "Analytics"],
        "github": "https://github.com/Legolasan/customer_session_analyser",
    },
    {
        "id": "2",
        "title": "Zendesk Test Case Generation",
        "description": "Create test cases from the Zendesk tickets for regression and functional testing.",
        "technologies": ["Python", "Zendesk API", "Test Automation"],
        "github": "https://github.com/Legolasan/zendesk_analyser",
    },
    {
        "id": "3",
        "title": "Snowflake Key Rotation",
        "description": "Rotate the Snowflake key-pairs from your terminal. Available as a PyPI package.",
        "technologies": ["Python", "Snowflake", "CLI", "PyPI"],
        "github": "https://github.com/Legolasan/sf_rotation",
    },
    {
        "id": "4",
        "title": "Weekly Reporting",
        "description": "Space where you can track your work items week over week.",
        "technologies": ["Python", "Flask", "PostgreSQL", "Productivity"],
        "github": "https://github.com/Legolasan/weekly_reporting",
    },
]

EXPERIENCES = [
    {
        "id": "1",
        "company": "Hevo Data Pvt. Ltd",
        "position": "Product Manager",
        "duration": "2024 - Present",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Defined and shipped improvements across Salesforce, HubSpot, NetSuite, Facebook Ads, Qualtrics, "
            "PostgreSQL, MySQL, MongoDB (Oplog/ChangeStreams), and SQL Server connectors.",
            "Drove initiatives to reduce ingestion failures, optimize historical load performance, and stabilize "
            "CDC pipelines handling millions of events.",
            "Designed improvements for error classification, async processing queues, offset management, and "
            "failure-recovery workflows across connectors.",
            "Led feature development for secure destinations, including private key based authentication, and "
            "automated test-connection validation.",
            "Analyzed customer setup sessions to identify friction points in pipeline creation and improve onboarding flows.",
        ],
    },
    {
        "id": "2",
        "company": "Hevo Data Pvt. Ltd",
        "position": "Product Support Manager",
        "duration": "2022 - 2024",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Improved the first response SLA coverage from 80% to >95%.",
            "Improved the resolution SLA coverage from 55% to >75%.",
            "Kept the fewer replies coverage above 80%.",
            "Maintained CSAT above 90% for email ticketing and 95% and above for chat.",
            "Kept the referral ratio under 30% for better balance between engineering and support teams.",
        ],
    },
    {
        "id": "3",
        "company": "Hevo Data Pvt. Ltd",
        "position": "Product Support Engineer",
        "duration": "2019 - 2022",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Handled incoming queries and issues for the Hevo ETL platform.",
            "Solved >70% of cases under 24 hours.",
            "Kept the referral to engineering below 30% and followed referred Jiras through to KB or troubleshooting articles.",
            "Contributed more than 5 KBs a week to the knowledge space.",
            "Maintained CSAT above 90% overall.",
        ],
    },
    {
        "id": "4",
        "company": "Sprinklr Inc.",
        "position": "Product Support Engineer",
        "duration": "2018 - 2019",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Provided technical support for the Sprinklr Premium Ads Serving platform for global clients.",
            "Acted as the point of contact between clients and engineering for escalated technical problems.",
            "Monitored and diagnosed ads platform incidents for mission-critical campaigns.",
        ],
    },
    {
        "id": "5",
        "company": "Yahoo Inc",
        "position": "Product Support Engineer",
        "duration": "2015 - 2018",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Provided advanced technical support for Yahoo Ads platforms.",
            "Diagnosed and resolved ad delivery, targeting, and reporting issues with engineering and product teams.",
            "Maintained a resolution SLA of over 85% for assigned support tickets.",
        ],
    },
    {
        "id": "6",
        "company": "Minacs",
        "position": "Associate Analyst",
        "duration": "2014 - 2014",
        "location": "Bengaluru, Karnataka",
        "description": [
            "Handled customer queries and provided technical support via email for Apple iTunes services.",
        ],
    },
]

EDUCATION = [
    {
        "id": "1",
        "institution": "Park College Of Technology",
        "degree": "Bachelor of Engineering",
        "field": "Aeronautical",
        "duration": "2009 - 2013",
        "location": "Coimbatore, Tamil Nadu",
    },
]

SKILLS = [
    {"name": "Python", "level": 50, "category": "Languages"},
    {"name": "SQL", "level": 50, "category": "Languages"},
    {"name": "Flask", "level": 50, "category": "Frameworks"},
    {"name": "FastAPI", "level": 50, "category": "Frameworks"},
    {"name": "Git", "level": 50, "category": "Tools"},
    {"name": "Docker", "level": 50, "category": "Tools"},
    {"name": "AWS", "level": 50, "category": "Tools"},
    {"name": "CI/CD", "level": 50, "category": "Tools"},
    {"name": "Customer Satisfaction", "level": 100, "category": "Support Engineering"},
    {"name": "Customer Advocacy", "level": 100, "category": "Support Engineering"},
    {"name": "Escalation Handling", "level": 100, "category": "Support Engineering"},
    {"name": "Team Performance Management", "level": 100, "category": "Support Manager"},
    {"name": "Stakeholder Management", "level": 100, "category": "Support Manager"},
    {"name": "Coaching & Mentorship", "level": 100, "category": "Support Manager"},
    {"name": "Strategic Thinking", "level": 100, "category": "Product Manager"},
    {"name": "Data Driven Decisions", "level": 100, "category": "Product Manager"},
    {"name": "Prioritization", "level": 100, "category": "Product Manager"},
    {"name": "Execution", "level": 100, "category": "Product Manager"},
]
