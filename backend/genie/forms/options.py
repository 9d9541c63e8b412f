OBJECTIVE_MEASUREMENT_OPTIONS: list[str] = [
    "Conversion Rate",
    "Click-Through Rate (CTR)",
    "Lead Generation",
    "Brand Awareness",
    "Engagement Rate",
    "Revenue/Sales",
    "Website Traffic",
    "Social Media Metrics",
    "Email Open/Click Rates",
]

PREFERRED_CHANNEL_OPTIONS: list[str] = [
    "Email Marketing",
    "Social Media (Organic)",
    "Paid Social Media",
    "Google Ads (Search)",
    "Google Ads (Display)",
    "Content Marketing",
    "SEO",
    "Webinars",
    "Events/Trade Shows",
    "PR/Media Relations",
    "Direct Mail",
    "Influencer Marketing",
    "Partnerships",
    "Retargeting/Remarketing",
    "Video Marketing",
]

ACTIVITY_TYPE_ONCE_OFF = "once-off"
ACTIVITY_TYPE_CAMPAIGN = "broader-campaign"
ACTIVITY_TYPE_OPTIONS: list[str] = [ACTIVITY_TYPE_ONCE_OFF, ACTIVITY_TYPE_CAMPAIGN]
