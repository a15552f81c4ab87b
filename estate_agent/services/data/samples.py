"""Sample Goa listings used to seed an empty catalog"""

SAMPLE_PROPERTIES = [
    {
        "title": "Luxury 2BHK Flat in North Goa",
        "type": "flat",
        "location": "Calangute",
        "city": "North Goa",
        "bedrooms": 2,
        "bathrooms": 2,
        "area": {"value": 1200, "unit": "sqft"},
        "price": 4500000,
        "forSale": True,
        "amenities": ["Swimming Pool", "Parking", "Garden"],
        "description": "Beautiful 2BHK flat near beach with modern amenities",
        "ownerContact": {"name": "John Doe", "phone": "9876543210", "email": "john@example.com"},
    },
    {
        "title": "Spacious 3BHK House in Panaji",
        "type": "house",
        "location": "Panaji",
        "city": "North Goa",
        "bedrooms": 3,
        "bathrooms": 3,
        "area": {"value": 1800, "unit": "sqft"},
        "price": 7500000,
        "forSale": True,
        "amenities": ["Parking", "Garden", "Balcony"],
        "description": "Independent house with garden in prime location",
    },
    {
        "title": "Commercial Shop in Margao",
        "type": "shop",
        "location": "Margao",
        "city": "South Goa",
        "area": {"value": 800, "unit": "sqft"},
        "price": 3500000,
        "forSale": True,
        "amenities": ["Main Road Access", "Parking"],
        "description": "Prime location shop in busy market area",
    },
    {
        "title": "1BHK Flat for Rent in Baga",
        "type": "flat",
        "location": "Baga",
        "city": "North Goa",
        "bedrooms": 1,
        "bathrooms": 1,
        "area": {"value": 600, "unit": "sqft"},
        "price": 25000,
        "forSale": False,
        "amenities": ["Furnished", "Parking"],
        "description": "Fully furnished 1BHK near Baga beach",
    },
    {
        "title": "4BHK Villa with Pool",
        "type": "villa",
        "location": "Anjuna",
        "city": "North Goa",
        "bedrooms": 4,
        "bathrooms": 4,
        "area": {"value": 3000, "unit": "sqft"},
        "price": 12000000,
        "forSale": True,
        "amenities": ["Swimming Pool", "Garden", "Parking", "Security"],
        "description": "Luxury villa with private pool and garden",
    },
]
