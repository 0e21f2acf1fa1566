"""States served by the app with their districts and parliamentary constituencies"""

REGIONS = {
    "Telangana": {
        "districts": [
            "Adilabad", "Bhadradri Kothagudem", "Hanamkonda", "Hyderabad", "Jagtial", "Jangaon",
            "Jayashankar Bhupalpally", "Jogulamba Gadwal", "Kamareddy", "Karimnagar", "Khammam",
            "Komaram Bheem Asifabad", "Mahabubabad", "Mahbubnagar", "Mancherial", "Medak",
            "Medchal-Malkajgiri", "Mulugu", "Nagarkurnool", "Nalgonda", "Narayanpet", "Nirmal",
            "Nizamabad", "Peddapalli", "Rajanna Sircilla", "Rangareddy", "Sangareddy", "Siddipet",
            "Suryapet", "Vikarabad", "Wanaparthy", "Warangal", "Yadadri Bhuvanagiri",
        ],
        "constituencies": [
            "Adilabad", "Bhongir", "Chevella", "Hyderabad", "Karimnagar", "Khammam",
            "Mahabubabad", "Mahbubnagar", "Malkajgiri", "Medak", "Nagarkurnool",
            "Nalgonda", "Nizamabad", "Peddapalle", "Secunderabad", "Warangal", "Zahirabad",
        ],
    },
    "Andhra Pradesh": {
        "districts": [
            "Alluri Sitharama Raju", "Anakapalli", "Anantapur", "Annamayya", "Bapatla", "Chittoor",
            "Dr. B.R. Ambedkar Konaseema", "East Godavari", "Eluru", "Guntur", "Kakinada", "Krishna",
            "Kurnool", "Nandyal", "NTR", "Palnadu", "Parvathipuram Manyam", "Prakasam",
            "SPSR Nellore", "Sri Sathya Sai", "Srikakulam", "Tirupati", "Visakhapatnam",
            "Vizianagaram", "West Godavari", "YSR District",
        ],
        "constituencies": [
            "Amalapuram", "Anakapalli", "Anantapur", "Araku", "Bapatla", "Chittoor",
            "Eluru", "Guntur", "Hindupur", "Kadapa", "Kakinada", "Kurnool",
            "Machilipatnam", "Nandyal", "Narasaraopet", "Narsapuram", "Nellore", "Ongole",
            "Rajahmundry", "Rajampet", "Srikakulam", "Tirupati", "Vijayawada",
            "Visakhapatnam", "Vizianagaram",
        ],
    },
}
