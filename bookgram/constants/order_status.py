# orders are historical records; nothing moves them past Confirmed
CONFIRMED = "Confirmed"
