"""
Factory defaults for the configuration document.

Seed content: system prompts per authoring mode, the advertising slots shown
around the editor, and the pricing packages offered on the pricing page.
"""

import copy

DEFAULT_PROMPTS = {
    "book": (
        "You are an award-winning, masterful novelist. Your task is to write deeply "
        "plotted novels of high literary value together with the user.\n"
        "- Focus on intricate plots and multi-dimensional character development.\n"
        "- Apply the \"show, don't tell\" principle.\n"
        "- Act like a ghostwriter.\n"
        "- Keep the tone professional, gripping and literary."
    ),
    "script": (
        "You are a professional screenwriter working to premium streaming standards.\n"
        "- Output MUST follow industry-standard screenplay format.\n"
        "- Scene headings (INT./EXT.), character names in CAPITALS, centred dialogue.\n"
        "- Never write plain prose."
    ),
    "chat": (
        "You are the user's creative partner (co-author).\n"
        "- Your job: find character names, pitch plot ideas and unblock the writer.\n"
        "- Use a warm, helpful tone."
    ),
}

LEFT_AD_SLOTS = [
    '<div style="width:100%; height:200px; background:linear-gradient(135deg, #667eea 0%, #764ba2 100%); '
    'border-radius:12px; padding:15px; color:white; text-align:center;"><h3>Creative Writing Masterclass</h3>'
    '<p style="font-size:11px;">Learn the secrets of building characters.</p>'
    '<button style="background:white; color:#764ba2; border:none; border-radius:20px;">Enrol at 50% off</button></div>',
    '<div style="width:100%; height:200px; background:#3e2723; border-radius:12px; padding:15px;">'
    '<span style="background:#d7ccc8; color:#3e2723; font-size:10px;">SPONSORED</span>'
    '<h4 style="color:#d7ccc8;">A Blend for Writers</h4>'
    '<button style="border:1px solid #d7ccc8; background:transparent; color:#d7ccc8;">Taste it</button></div>',
    '<div style="width:100%; padding:15px; background:#1f2937; border:1px solid #374151; border-radius:8px; '
    'color:#9ca3af; font-size:12px;"><strong>Editor\'s pick:</strong> discover this month\'s most read '
    'science fiction stories <a href="#" style="color:#60a5fa;">here.</a></div>',
    '<div style="width:100%; height:300px; background:#ffffff; border-radius:4px; text-align:center;">'
    '<span style="color:#ccc; font-size:10px;">Advertisement</span><h2 style="color:#4285f4;">Your brand</h2>'
    '<p style="color:#555; font-size:12px;">Your ads here</p></div>',
    '<div style="width:100%; height:150px; background:linear-gradient(to right, #00b09b, #96c93d); '
    'border-radius:12px; padding:15px; color:white;"><h4>A Scrivener Alternative</h4>'
    '<p style="font-size:11px;">Screenwriting software made locally.</p></div>',
    '<div style="width:100%; height:200px; background:#1a202c; border:1px dashed #718096; border-radius:12px; '
    'text-align:center; padding:10px; color:#a0aec0; font-size:12px;">Paste your own ad code (HTML/JS) here.'
    '<br><br>Fits 160x600 or 250x250.</div>',
]

RIGHT_AD_SLOTS = [
    '<div style="width:100%; height:250px; background:#2c3e50; border-radius:12px; padding:20px; '
    'text-align:center; color:#ecf0f1;"><h3>Let\'s Publish Your Book!</h3>'
    '<p style="font-size:12px; color:#bdc3c7;">Send your manuscript for an editorial review.</p>'
    '<button style="width:100%; background:#e74c3c; border:none; color:white;">Apply</button></div>',
    '<div style="width:100%; height:120px; background:#000; border:1px solid #333; border-radius:8px; '
    'padding:10px;"><div style="color:white; font-size:13px; font-weight:bold;">Mechanical Keyboard</div>'
    '<div style="color:#666; font-size:10px;">Silent switches for writers.</div></div>',
    '<div style="width:100%; height:250px; background:#f1f3f4; border:1px solid #dadce0; text-align:center;">'
    '<span style="color:#80868b; font-size:14px;">Ad space (250x250)</span></div>',
    '<div style="width:100%; height:180px; background:#fff8e1; color:#5d4037; padding:15px; border-radius:8px; '
    'font-family:serif;"><h3 style="font-style:italic;">The Art of Typography</h3>'
    '<p style="font-size:12px;">How should your words look on the page?</p>'
    '<a href="#" style="color:#ff6f00; font-size:12px;">Watch the lesson</a></div>',
    '<div style="width:100%; height:100px; border:2px dotted #4b5563; border-radius:8px; text-align:center; '
    'color:#4b5563; font-size:11px;">Ad space #5</div>',
    '<div style="width:100%; height:100px; border:2px dotted #4b5563; border-radius:8px; text-align:center; '
    'color:#4b5563; font-size:11px;">Ad space #6</div>',
]

MOBILE_AD_SLOTS = [
    '<div style="width:100%; height:50px; background:linear-gradient(90deg, #1CB5E0 0%, #000851 100%); '
    'padding:0 15px; color:white;"><div style="font-weight:bold; font-size:12px;">Speed up your novel</div>'
    '<div style="font-size:9px;">AD</div></div>',
    '<div style="width:100%; padding:10px; margin:10px 0; background:#2d3748; border-left:3px solid #ed8936; '
    'border-radius:4px;"><p style="color:#e2e8f0; font-size:12px;"><strong>Tip:</strong> struggling with '
    'character names? Try our name generator.</p></div>',
    '<div style="width:100%; height:40px; background:#1a202c; border-top:1px solid #2d3748; text-align:center;">'
    '<a href="#" style="color:#a0aec0; font-size:11px;">Remove ads <span style="background:#4a5568; '
    'color:white; font-size:9px;">Premium</span></a></div>',
]

DEFAULT_PACKAGES = [
    {
        "id": "basic",
        "name": "Starter",
        "price": 0,
        "currency": "TL",
        "features": ["Basic chat mode", "Limited character analysis", "Daily capped usage"],
        "isPopular": False,
    },
    {
        "id": "pro",
        "name": "Professional Writer",
        "price": 149,
        "currency": "TL",
        "features": [
            "Unlimited novel & screenplay modes",
            "Unlimited model access",
            "Ad-free experience",
            "PDF export",
            "Unlimited prompts",
        ],
        "isPopular": True,
    },
]

DEFAULT_CONFIG = {
    "schemaVersion": 1,
    "freeDailyLimit": 10,
    "maintenanceMode": False,
    "systemPrompts": DEFAULT_PROMPTS,
    "adConfig": {
        "isEnabled": True,
        "leftAdSlots": LEFT_AD_SLOTS,
        "rightAdSlots": RIGHT_AD_SLOTS,
        "mobileAdSlots": MOBILE_AD_SLOTS,
    },
    "shopierConfig": {
        "apiKey": "",
        "apiSecret": "",
        "websiteIndex": "1",
        "isEnabled": True,
    },
    "googleAuthConfig": {
        "clientId": "",
        "isEnabled": True,
    },
    "packages": DEFAULT_PACKAGES,
}


def default_config_document() -> dict:
    """Fresh copy of the factory configuration document."""
    return copy.deepcopy(DEFAULT_CONFIG)
