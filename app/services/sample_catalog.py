"""Built-in catalog served when no usable catalog source is available."""
from decimal import Decimal

from models.product import Category, Product

CATEGORIES = [
    Category(name="Fruits & Vegetables", icon="🥬", color="green",
             subcategories=["Fresh Fruits", "Fresh Vegetables", "Herbs"]),
    Category(name="Dairy & Eggs", icon="🥛", color="blue",
             subcategories=["Milk", "Cheese", "Yogurt", "Eggs"]),
    Category(name="Meat & Seafood", icon="🍗", color="red",
             subcategories=["Chicken", "Mutton", "Fish", "Prawns"]),
    Category(name="Pantry Staples", icon="🌾", color="orange",
             subcategories=["Rice", "Flour", "Oil", "Spices"]),
    Category(name="Snacks & Beverages", icon="🍿", color="purple",
             subcategories=["Chips", "Biscuits", "Soft Drinks", "Juices"]),
    Category(name="Personal Care", icon="🧴", color="pink",
             subcategories=["Skincare", "Hair Care", "Oral Care"]),
    Category(name="Household", icon="🧽", color="gray",
             subcategories=["Cleaning", "Detergent", "Kitchen Items"]),
]

# id, name, description, price, original price, category, subcategory, unit,
# brand, rating, review count, tags
_ROWS = [
    ("p001", "Fresh Bananas", "Sweet and ripe yellow bananas, perfect for smoothies and snacks",
     "40", "50", "Fruits & Vegetables", "Fresh Fruits", "1 dozen", "Farm Fresh", 4.3, 245, ["fresh", "organic"]),
    ("p002", "Red Apples", "Crisp and juicy red apples from Himachal Pradesh",
     "120", "140", "Fruits & Vegetables", "Fresh Fruits", "1 kg", "Hill Fresh", 4.5, 189, ["fresh", "premium"]),
    ("p003", "Fresh Spinach", "Leafy green spinach rich in iron and vitamins",
     "25", None, "Fruits & Vegetables", "Fresh Vegetables", "250g", "Green Fields", 4.2, 156, ["leafy", "healthy"]),
    ("p004", "Organic Tomatoes", "Vine-ripened organic tomatoes with rich flavor",
     "80", "95", "Fruits & Vegetables", "Fresh Vegetables", "1 kg", "Organic Valley", 4.6, 234, ["organic", "fresh"]),
    ("p005", "Fresh Onions", "Premium quality onions for everyday cooking",
     "35", None, "Fruits & Vegetables", "Fresh Vegetables", "1 kg", "Farm Direct", 4.1, 98, ["essential", "cooking"]),
    ("p006", "Amul Milk", "Fresh full cream milk from Amul",
     "28", None, "Dairy & Eggs", "Milk", "500ml", "Amul", 4.7, 567, ["fresh", "daily"]),
    ("p007", "Farm Fresh Eggs", "Brown eggs from free-range chickens",
     "84", "90", "Dairy & Eggs", "Eggs", "12 pieces", "Country Eggs", 4.4, 189, ["protein", "fresh"]),
    ("p008", "Amul Cheese Slices", "Processed cheese slices perfect for sandwiches",
     "135", None, "Dairy & Eggs", "Cheese", "200g", "Amul", 4.3, 234, ["creamy", "convenient"]),
    ("p009", "Greek Yogurt", "Thick and creamy Greek style yogurt",
     "65", "75", "Dairy & Eggs", "Yogurt", "200g", "Mother Dairy", 4.5, 156, ["healthy", "probiotic"]),
    ("p010", "Fresh Chicken Breast", "Boneless chicken breast, antibiotic-free",
     "250", None, "Meat & Seafood", "Chicken", "500g", "Licious", 4.6, 345, ["fresh", "protein"]),
    ("p011", "Rohu Fish", "Fresh water fish, cleaned and cut",
     "180", "200", "Meat & Seafood", "Fish", "500g", "FreshToHome", 4.4, 123, ["fresh", "omega3"]),
    ("p012", "Basmati Rice", "Premium aged basmati rice with long grains",
     "185", "200", "Pantry Staples", "Rice", "1 kg", "India Gate", 4.8, 678, ["premium", "aromatic"]),
    ("p013", "Wheat Flour", "Fresh ground whole wheat flour",
     "45", None, "Pantry Staples", "Flour", "1 kg", "Aashirvaad", 4.5, 456, ["whole grain", "fresh"]),
    ("p014", "Sunflower Oil", "Refined sunflower cooking oil",
     "140", "155", "Pantry Staples", "Oil", "1L", "Fortune", 4.3, 234, ["cooking", "healthy"]),
    ("p015", "Turmeric Powder", "Pure turmeric powder with natural color",
     "25", None, "Pantry Staples", "Spices", "100g", "MDH", 4.6, 189, ["spice", "natural"]),
    ("p016", "Lay's Classic Chips", "Crispy potato chips with classic salted flavor",
     "20", None, "Snacks & Beverages", "Chips", "52g", "Lay's", 4.2, 567, ["crispy", "snack"]),
    ("p017", "Oreo Cookies", "Chocolate sandwich cookies with cream filling",
     "25", "30", "Snacks & Beverages", "Biscuits", "120g", "Oreo", 4.7, 789, ["sweet", "chocolate"]),
    ("p018", "Coca Cola", "Refreshing cola soft drink",
     "40", None, "Snacks & Beverages", "Soft Drinks", "600ml", "Coca Cola", 4.1, 234, ["refreshing", "cold"]),
    ("p019", "Real Mango Juice", "100% natural mango fruit juice",
     "35", "40", "Snacks & Beverages", "Juices", "200ml", "Real", 4.4, 345, ["natural", "vitamin"]),
    ("p020", "Dove Soap", "Moisturizing beauty bar with 1/4 moisturizing cream",
     "45", "50", "Personal Care", "Skincare", "100g", "Dove", 4.5, 456, ["moisturizing", "gentle"]),
    ("p021", "Head & Shoulders Shampoo", "Anti-dandruff shampoo for healthy scalp",
     "180", None, "Personal Care", "Hair Care", "400ml", "Head & Shoulders", 4.3, 234, ["anti-dandruff", "clean"]),
    ("p022", "Colgate Toothpaste", "Complete care toothpaste for healthy teeth",
     "95", "105", "Personal Care", "Oral Care", "200g", "Colgate", 4.6, 567, ["fluoride", "fresh"]),
    ("p023", "Vim Dishwash Gel", "Powerful grease cutting dishwash gel",
     "85", None, "Household", "Cleaning", "500ml", "Vim", 4.4, 234, ["cleaning", "grease-cutting"]),
    ("p024", "Surf Excel Detergent", "Removes tough stains with easy wash technology",
     "245", "260", "Household", "Detergent", "1 kg", "Surf Excel", 4.5, 345, ["stain-removal", "effective"]),
]


def sample_products():
    return [
        Product(
            id=pid,
            name=name,
            description=description,
            price=Decimal(price),
            original_price=Decimal(original) if original else None,
            category=category,
            subcategory=subcategory,
            unit=unit,
            brand=brand,
            rating=rating,
            review_count=reviews,
            tags=tags,
        )
        for (pid, name, description, price, original, category, subcategory,
             unit, brand, rating, reviews, tags) in _ROWS
    ]
