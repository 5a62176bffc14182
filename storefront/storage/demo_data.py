from decimal import Decimal


DEMO_PRODUCTS = [
    {
        "id": "1",
        "name": "Fresh Spinach",
        "description": "Premium quality organic spinach, rich in iron and vitamins",
        "category": "leafy",
        "price": Decimal("45.00"),
        "original_price": Decimal("55.00"),
        "image_url": "https://images.unsplash.com/photo-1576045057995-568f588f82fb?w=400&h=300&fit=crop",
        "cut_styles": ["Whole Leaves", "Chopped", "Baby Spinach"],
        "freshness_days": 3,
        "is_organic": True,
        "stock": 50,
        "nutrition_info": {"protein": "2.9g", "carbs": "3.6g", "fiber": "2.2g", "calories": "23"},
    },
    {
        "id": "2",
        "name": "Fresh Carrots",
        "description": "Sweet and crunchy carrots, perfect for cooking and salads",
        "category": "root",
        "price": Decimal("32.00"),
        "original_price": Decimal("38.00"),
        "image_url": "https://images.unsplash.com/photo-1598170845058-32b9d6a5da37?w=400&h=300&fit=crop",
        "cut_styles": ["Whole", "Diced", "Julienne", "Sliced"],
        "freshness_days": 7,
        "is_organic": False,
        "stock": 75,
        "nutrition_info": {"protein": "0.9g", "carbs": "9.6g", "fiber": "2.8g", "calories": "41"},
    },
    {
        "id": "3",
        "name": "Bell Peppers Mix",
        "description": "Colorful mix of red, yellow, and green bell peppers",
        "category": "seasonal",
        "price": Decimal("75.00"),
        "original_price": Decimal("85.00"),
        "image_url": "https://images.unsplash.com/photo-1563565375-f3fdfdbefa83?w=400&h=300&fit=crop",
        "cut_styles": ["Whole", "Strips", "Diced", "Rings"],
        "freshness_days": 5,
        "is_organic": True,
        "stock": 40,
        "nutrition_info": {"protein": "1.9g", "carbs": "9.0g", "fiber": "2.5g", "calories": "31"},
    },
    {
        "id": "4",
        "name": "Fresh Broccoli",
        "description": "Nutrient-rich broccoli florets, high in vitamin C",
        "category": "seasonal",
        "price": Decimal("68.00"),
        "original_price": None,
        "image_url": "https://images.unsplash.com/photo-1628773822503-930a7eaecf80?w=400&h=300&fit=crop",
        "cut_styles": ["Florets", "Chopped", "Whole Head"],
        "freshness_days": 4,
        "is_organic": False,
        "stock": 30,
        "nutrition_info": {"protein": "2.8g", "carbs": "6.6g", "fiber": "2.6g", "calories": "34"},
    },
    {
        "id": "5",
        "name": "Organic Kale",
        "description": "Superfood kale leaves, packed with antioxidants",
        "category": "leafy",
        "price": Decimal("55.00"),
        "original_price": Decimal("65.00"),
        "image_url": "https://images.unsplash.com/photo-1590779033100-9f60a05a013d?w=400&h=300&fit=crop",
        "cut_styles": ["Whole Leaves", "Chopped", "Massage Ready"],
        "freshness_days": 5,
        "is_organic": True,
        "stock": 35,
        "nutrition_info": {"protein": "4.3g", "carbs": "8.8g", "fiber": "3.6g", "calories": "49"},
    },
    {
        "id": "6",
        "name": "Fresh Tomatoes",
        "description": "Juicy and ripe tomatoes, perfect for salads and cooking",
        "category": "seasonal",
        "price": Decimal("42.00"),
        "original_price": None,
        "image_url": "https://images.unsplash.com/photo-1546470427-e26264e7ac1e?w=400&h=300&fit=crop",
        "cut_styles": ["Whole", "Sliced", "Diced", "Wedges"],
        "freshness_days": 6,
        "is_organic": False,
        "stock": 60,
        "nutrition_info": {"protein": "0.9g", "carbs": "3.9g", "fiber": "1.2g", "calories": "18"},
    },
]
