from __future__ import annotations

from genie.forms.models import FormDefinition, FormField, VisibleWhen
from genie.forms.options import (
    ACTIVITY_TYPE_CAMPAIGN,
    ACTIVITY_TYPE_ONCE_OFF,
    ACTIVITY_TYPE_OPTIONS,
    OBJECTIVE_MEASUREMENT_OPTIONS,
    PREFERRED_CHANNEL_OPTIONS,
)


CONTACT_FORM = FormDefinition(
    id="contact",
    title="Contact Form",
    description="Get in touch with us",
    fields=[
        FormField(
            name="name",
            label="Full Name",
            type="text",
            placeholder="Enter your full name",
            required=True,
            min_length=2,
            message="Name must be at least 2 characters",
        ),
        FormField(
            name="email",
            label="Email Address",
            type="email",
            placeholder="Enter your email",
            required=True,
            message="Invalid email address",
        ),
        FormField(
            name="message",
            label="Message",
            type="textarea",
            placeholder="Enter your message",
            required=True,
            min_length=10,
            message="Message must be at least 10 characters",
        ),
    ],
)

FEEDBACK_FORM = FormDefinition(
    id="feedback",
    title="Feedback Form",
    description="Share your feedback with us",
    fields=[
        FormField(
            name="rating",
            label="Rating",
            type="select",
            options=["1 - Poor", "2 - Fair", "3 - Good", "4 - Great", "5 - Excellent"],
            required=True,
            message="Please select a rating",
        ),
        FormField(
            name="category",
            label="Category",
            type="select",
            options=["Product", "Service", "Support", "Website", "Other"],
            required=True,
            message="Please select a category",
        ),
        FormField(
            name="feedback",
            label="Your Feedback",
            type="textarea",
            placeholder="Tell us what you think...",
            required=True,
            min_length=5,
            message="Feedback must be at least 5 characters",
        ),
    ],
)

SURVEY_FORM = FormDefinition(
    id="survey",
    title="Customer Survey",
    description="Help us understand your needs",
    fields=[
        FormField(
            name="age",
            label="Age",
            type="number",
            placeholder="Enter your age",
            required=True,
            message="Please enter your age",
        ),
        FormField(
            name="occupation",
            label="Occupation",
            type="text",
            placeholder="Enter your occupation",
            required=True,
            min_length=2,
            message="Please enter your occupation",
        ),
        FormField(
            name="experience",
            label="Experience Level",
            type="select",
            options=["Beginner", "Intermediate", "Advanced", "Expert"],
            required=True,
            message="Please select your experience level",
        ),
        FormField(
            name="suggestions",
            label="Additional Suggestions",
            type="textarea",
            placeholder="Any suggestions for improvement?",
        ),
    ],
)

NEWSLETTER_FORM = FormDefinition(
    id="newsletter",
    title="Newsletter Signup",
    description="Subscribe to our newsletter for updates",
    fields=[
        FormField(
            name="firstName",
            label="First Name",
            type="text",
            placeholder="Enter your first name",
            required=True,
            message="First name is required",
        ),
        FormField(
            name="email",
            label="Email Address",
            type="email",
            placeholder="Enter your email address",
            required=True,
            message="Please enter a valid email address",
        ),
        FormField(
            name="interests",
            label="Areas of Interest",
            type="select",
            options=["Technology", "Business", "Design", "Marketing", "General News"],
            required=True,
            message="Please select your interests",
        ),
        FormField(
            name="frequency",
            label="Email Frequency",
            type="select",
            options=["Daily", "Weekly", "Bi-weekly", "Monthly"],
            required=True,
            message="Please select your preferred frequency",
        ),
    ],
)

_CAMPAIGN_ONLY = VisibleWhen(field="activityType", equals=ACTIVITY_TYPE_CAMPAIGN)

MARKETING_REQUEST_FORM = FormDefinition(
    id="marketing-request",
    title="Marketing Request",
    description="Submit a request for marketing activities and campaigns",
    notify_email=True,
    fields=[
        FormField(
            name="background",
            label="Background Information / Context / What would you like done?",
            type="textarea",
            placeholder="Provide background information and context for this marketing request...",
            required=True,
            min_length=10,
            message="Please provide background context (minimum 10 characters)",
            help=[
                "Include relevant context like timeline, budget constraints, or previous efforts",
                "Explain the business problem you're trying to solve",
                "Mention any key stakeholders or departments involved",
            ],
            examples=[
                "We need to increase brand awareness for our new product launch",
                "Generate more qualified leads for our B2B software",
                "Drive more traffic to our e-commerce site during holiday season",
                "Promote our upcoming webinar to IT professionals",
            ],
        ),
        FormField(
            name="objectives",
            label="What are the objectives that we need to meet?",
            type="textarea",
            placeholder=(
                "Describe the specific objectives and goals. Please be as specific as possible. "
                "Consider using SMART goals..."
            ),
            required=True,
            min_length=10,
            message="Please describe the objectives (minimum 10 characters)",
            help=[
                "Use SMART goals: Specific, Measurable, Achievable, Relevant, Time-bound",
                "Be as specific as possible with numbers and timelines",
                "Align objectives with overall business goals",
            ],
            examples=[
                "Increase website traffic by 25% within 3 months",
                "Generate 100 qualified leads per month",
                "Achieve 10,000 social media followers by Q4",
                "Boost email open rates to 25%",
            ],
        ),
        FormField(
            name="measurement",
            label="How will we measure these objectives?",
            type="multiselect",
            options=list(OBJECTIVE_MEASUREMENT_OPTIONS),
            required=True,
            min_items=1,
            message="Please select at least one measurement method",
            allow_custom=True,
            include_not_sure=True,
            ai_assistance=True,
            help=[
                "Select multiple metrics that align with your objectives",
                "Add custom metrics if needed",
                "Choose 'I'm not sure' if you need guidance on measurement",
            ],
            examples=[
                "Awareness goals: Impressions, reach, brand mentions",
                "Engagement goals: CTR, time on page, social shares",
                "Lead generation: Conversion rate, cost per lead",
                "Sales goals: Revenue, ROI, customer acquisition cost",
            ],
        ),
        FormField(
            name="ccEmails",
            label="CC for Review/Comments",
            type="emails",
            placeholder="name@example.com",
            message="Please enter valid email addresses",
            help=[
                "Add email addresses of people you want to CC for review and comments",
                "These people will receive notifications about this marketing request",
                "Optional - only add if you need specific stakeholders to be involved",
            ],
            examples=["stakeholder@company.com", "manager@company.com", "team-lead@company.com"],
        ),
        FormField(
            name="targeting",
            label="Who are we targeting with this marketing activity?",
            type="textarea",
            placeholder="Describe your target audience, demographics, personas, etc...",
            required=True,
            min_length=10,
            message="Please describe your target audience (minimum 10 characters)",
            help=[
                "Consider demographics: age, gender, location, income",
                "Include psychographics: interests, values, lifestyle",
                "Mention behavioral patterns: buying habits, brand loyalty",
                "For B2B: job titles, company size, industry",
            ],
            examples=[
                "Small business owners in tech, 25-45 years old",
                "Marketing managers at companies with 50-500 employees",
                "Parents with young children interested in healthy living",
                "IT professionals at enterprise companies",
            ],
        ),
        FormField(
            name="examples",
            label="Have you seen this marketing activity being used before? (optional)",
            type="textarea",
            placeholder="Describe examples, creative concepts, or inspiration you've seen...",
            help=[
                "This helps us understand your preferences and avoid reinventing the wheel",
                "Describe what specifically you liked about the examples",
                "Add any relevant links in the section below",
            ],
            examples=[
                "Competitor campaigns you admire",
                "Industry case studies or best practices",
                "Creative concepts or formats you've seen work well",
                "Specific tactics or messaging approaches",
            ],
        ),
        FormField(
            name="exampleLinks",
            label="Reference Links",
            type="links",
            placeholder="https://example.com/campaign",
            message="Please enter valid URLs",
            help=[
                "Add links to campaigns, case studies, or examples you mentioned above",
                "Include any competitor examples or inspiration sources",
                "Links help the team understand your vision better",
            ],
            examples=[
                "Campaign landing pages you admire",
                "Competitor marketing examples",
                "Industry articles or case studies",
                "Creative portfolios or inspiration sites",
            ],
        ),
        FormField(
            name="actionSteps",
            label=(
                "What are the expected action steps of your target persona once they have been "
                "reached by this marketing activity?"
            ),
            type="textarea",
            placeholder="Describe the customer journey and expected actions...",
            required=True,
            min_length=10,
            message="Please describe expected action steps (minimum 10 characters)",
            help=[
                "Map out the complete customer journey from awareness to conversion",
                "Think about each step in the funnel",
                "Consider what actions you want users to take at each stage",
            ],
            examples=[
                "See ad → Visit landing page → Download whitepaper → Schedule demo",
                "Read email → Click to website → Add to cart → Purchase",
                "View social post → Follow account → Sign up for newsletter",
                "Watch video → Visit website → Request quote → Become customer",
            ],
        ),
        FormField(
            name="activityType",
            label="What type of marketing activity is this?",
            type="select",
            options=list(ACTIVITY_TYPE_OPTIONS),
            required=True,
            default=ACTIVITY_TYPE_ONCE_OFF,
            message="Please choose an activity type",
        ),
        FormField(
            name="preferredChannels",
            label="Are there any specific mediums, channels you'd like to use?",
            type="multiselect",
            options=list(PREFERRED_CHANNEL_OPTIONS),
            allow_custom=True,
            visible_when=_CAMPAIGN_ONLY,
            help=[
                "Select the marketing channels that align with your target audience",
                "Consider where your audience is most active",
                "Add custom channels if your preferred option isn't listed",
            ],
            examples=[
                "B2B: LinkedIn, Email, Webinars, Industry events",
                "B2C: Instagram, Facebook, Google Ads, Influencer partnerships",
                "Mixed: Content marketing, SEO, PR, Direct mail",
            ],
        ),
        FormField(
            name="timeline",
            label="What timeline are you expecting for this?",
            type="text",
            placeholder="e.g. 3 months, launching in Q3",
            visible_when=_CAMPAIGN_ONLY,
        ),
        FormField(
            name="budget",
            label="What is the budget?",
            type="text",
            placeholder="e.g. $10,000 total campaign budget",
            visible_when=_CAMPAIGN_ONLY,
            help=[
                "Include total campaign budget including ad spend, content creation, and tools",
                "Indicate if budget is monthly, quarterly, or total campaign",
            ],
            examples=["$10,000 total campaign budget"],
        ),
        FormField(
            name="contactEmail",
            label="Your contact email",
            type="email",
            placeholder="name@example.com",
            required=True,
            message="Please enter a valid email address",
        ),
        FormField(
            name="submission-info",
            label="Before You Submit",
            type="disclosure",
            variant="info",
            content=[
                "Your marketing request will be automatically posted to the Marketing team's "
                "Microsoft Teams channel for review and assignment.",
            ],
        ),
    ],
)

BUILTIN_FORMS: list[FormDefinition] = [
    CONTACT_FORM,
    FEEDBACK_FORM,
    SURVEY_FORM,
    NEWSLETTER_FORM,
    MARKETING_REQUEST_FORM,
]
