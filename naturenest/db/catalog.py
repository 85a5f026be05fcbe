# naturenest/db/catalog.py
# Fixed category/amenity catalog synced into the DB at startup.

CATEGORIES = [
    {
        "name": "cabin",
        "description": "Cozy wooden cabins in natural settings, perfect for a rustic getaway",
    },
    {
        "name": "airstream",
        "description": "Classic Airstream trailers offering a unique and retro camping experience",
    },
    {
        "name": "tent",
        "description": "Traditional camping tents for an authentic outdoor adventure",
    },
    {
        "name": "warehouse",
        "description": "Converted industrial spaces offering unique, spacious accommodations",
    },
    {
        "name": "cottage",
        "description": "Charming small houses offering comfort and traditional countryside appeal",
    },
    {
        "name": "container",
        "description": "Modern converted shipping containers with innovative designs",
    },
    {
        "name": "caravan",
        "description": "Mobile homes and caravans for a flexible traveling experience",
    },
    {
        "name": "lodge",
        "description": "Spacious mountain or forest lodges ideal for group getaways",
    },
    {
        "name": "farmhouse",
        "description": "Traditional farm accommodations offering an authentic rural experience",
    },
    {
        "name": "yurt",
        "description": "Traditional circular tents providing a unique glamping experience",
    },
    {
        "name": "safari_tent",
        "description": "Luxury canvas tents inspired by African safaris for glamping adventures",
    },
    {
        "name": "converted_barn",
        "description": "Renovated barns combining rustic charm with modern comfort",
    },
]

AMENITIES = [
    {"name": "pig_feeding", "description": "Experience feeding and caring for pigs"},
    {"name": "crop_harvesting", "description": "Participate in harvesting seasonal crops"},
    {"name": "dairy_milking", "description": "Learn and experience dairy cow milking"},
    {"name": "chicken_coop", "description": "Collect eggs and feed chickens"},
    {"name": "organic_garden", "description": "Work in an organic vegetable garden"},
    {"name": "tractor_riding", "description": "Experience riding farm tractors"},
    {"name": "beekeeping", "description": "Learn about beekeeping and honey production"},
    {"name": "sheep_shearing", "description": "Watch or participate in sheep shearing"},
]
