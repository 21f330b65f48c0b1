from app import create_app
from extensions import db
from models import Trek

# ====== SAMPLE CATALOG ======
TREKS = [
    {
        "title": "Kedarkantha Winter Trek",
        "description": "A classic snow trek through pine forests to a summit with views of the Garhwal peaks.",
        "duration": "6 Days",
        "difficulty": "Easy to Moderate",
        "price": 11500,
        "overview": "Kedarkantha is one of the few Himalayan summits open in deep winter, "
                    "with gentle trails, frozen lakes and wide campsites.",
        "highlights": ["Summit sunrise at 12,500 ft", "Juda ka Talab frozen lake", "Campsites in oak and pine forest"],
        "who_can_participate": "Beginners with basic fitness, ages 10 and up.",
        "itinerary": [
            {"day": "dayOne", "activity": "Drive from Dehradun to Sankri base village."},
            {"day": "dayTwo", "activity": "Trek to Juda ka Talab through pine forest."},
            {"day": "dayThree", "activity": "Trek to Kedarkantha base camp."},
            {"day": "dayFour", "activity": "Summit push before dawn, descend to Hargaon."},
            {"day": "dayFive", "activity": "Descend to Sankri."},
            {"day": "daySix", "activity": "Drive back to Dehradun."},
        ],
        "how_to_reach": "Overnight bus or train to Dehradun; pickup from Dehradun railway station at 6:30 AM.",
        "cost_terms": "Includes stay, meals on trek, permits and guide. Excludes travel to Dehradun and porterage.",
        "trek_essentials": ["Trekking shoes", "Three warm layers", "Rain jacket", "Headlamp", "Water bottles"],
    },
    {
        "title": "Hampta Pass Crossover",
        "description": "A dramatic crossover from the green Kullu valley to the stark deserts of Lahaul.",
        "duration": "5 Days",
        "difficulty": "Moderate",
        "price": 13500,
        "overview": "Hampta Pass connects two very different valleys in a short, varied trek with a side trip to Chandratal.",
        "highlights": ["Crossing the 14,100 ft pass", "Chandratal lake", "River crossings at Balu ka Ghera"],
        "who_can_participate": "Fit trekkers who can jog 5 km in 35 minutes.",
        "itinerary": [
            {"day": "dayOne", "activity": "Drive from Manali to Jobra, trek to Chika."},
            {"day": "dayTwo", "activity": "Trek to Balu ka Ghera."},
            {"day": "dayThree", "activity": "Cross Hampta Pass, descend to Shea Goru."},
            {"day": "dayFour", "activity": "Trek to Chhatru, drive to Chandratal."},
            {"day": "dayFive", "activity": "Drive back to Manali."},
        ],
        "how_to_reach": "Overnight Volvo from Delhi to Manali.",
        "cost_terms": "Includes stay, meals, permits and transport from Manali.",
        "trek_essentials": ["Trekking shoes", "Trekking pole", "Sunglasses", "Sunscreen"],
    },
    {
        "title": "Valley of Flowers",
        "description": "A monsoon walk into a UNESCO valley carpeted with alpine flowers.",
        "duration": "6 Days",
        "difficulty": "Easy",
        "price": 12900,
        "overview": "Walk through meadows of blooming flowers and visit the high lake at Hemkund Sahib.",
        "highlights": ["Over 300 species of flowers", "Hemkund Sahib lake", "Pushpawati river valley"],
        "who_can_participate": "Anyone with basic fitness, ages 8 and up.",
        "itinerary": [
            {"day": "dayOne", "activity": "Drive from Rishikesh to Govindghat."},
            {"day": "dayTwo", "activity": "Trek to Ghangaria."},
            {"day": "dayThree", "activity": "Explore the Valley of Flowers."},
            {"day": "dayFour", "activity": "Hike to Hemkund Sahib."},
            {"day": "dayFive", "activity": "Descend to Govindghat."},
            {"day": "daySix", "activity": "Drive back to Rishikesh."},
        ],
        "how_to_reach": "Reach Rishikesh by bus or train; pickup at 6:00 AM.",
        "cost_terms": "Includes guesthouse stay, meals and guide. Excludes mule charges.",
        "trek_essentials": ["Rain cover", "Poncho", "Quick-dry clothing", "Trekking shoes"],
    },
]
# =====================


def seed_treks():
    if Trek.query.count() > 0:
        print("Treks already exist, nothing to seed.")
        return 0

    for data in TREKS:
        db.session.add(Trek(**data))
    db.session.commit()
    print(f"Created {len(TREKS)} treks.")
    return len(TREKS)


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
        seed_treks()
