"""
Institution extraction patterns for bank-text transaction detection.
Seed tables for the pattern registry, one dict per bank or payment app.

Each rule is a regex source string with two capture groups:
group 1 = amount text, group 2 = counterparty/description text
(group 2 is optional for income and some transfer rules).
"""

# Notification sources (identifier = app identifier, matched by equality)
NOTIFICATION_INSTITUTIONS = [
    {
        "name": "Revolut",
        "identifier": "revolut",
        "account_label": "Revolut",
        "expense": r"(?i)(?:You\s+spent|Hai\s+speso|Payment|Pagamento).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:at|presso|in|to|a|di)\s+(.+)",
        "income": r"(?i)(?:You\s+received|Hai\s+ricevuto|Received|Accredito).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:from|da)\s+(.+)",
        "transfer": r"(?i)(?:Transfer|Trasferimento|Bonifico).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:to|a)\s+(.+)",
    },
    {
        "name": "PayPal",
        "identifier": "paypal",
        "account_label": "PayPal",
        "expense": r"(?i)(?:You\s+sent|Hai\s+inviato|Pagamento).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:to|a)\s+(.+)",
        "income": r"(?i)(?:You\s+received|Hai\s+ricevuto).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:from|da)\s+(.+)",
    },
    {
        "name": "Postepay",
        "identifier": "postepay",
        "account_label": "Postepay",
        "expense": r"(?i)(?:Pagamento|Addebito|Autorizzazione).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:presso|at|c/o)\s+(.+)",
        "income": r"(?i)(?:Accredito|Ricarica).*?€?\s*([\d.,]+)\s*(?:EUR)?",
        "transfer": r"(?i)Bonifico.*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:a|verso)\s+(.+)",
    },
    {
        "name": "BBVA",
        "identifier": "bbva",
        "account_label": "BBVA",
        "expense": r"(?i)(?:Compra|Pago|Cargo|Acquisto).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:en|c/o)\s+(.+)",
        "income": r"(?i)(?:Ingreso|Abono|Entrata).*?€?\s*([\d.,]+)\s*(?:EUR)?",
        "transfer": r"(?i)Transferencia.*?€?\s*([\d.,]+)\s*(?:EUR)?.*?a\s+(.+)",
    },
    {
        "name": "Intesa Sanpaolo",
        "identifier": "intesa",
        "account_label": "Intesa Sanpaolo",
        "expense": r"(?i)(?:Addebito|Pagamento|Pos).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:presso|c/o)\s+(.+)",
        "income": r"(?i)Accredito.*?€?\s*([\d.,]+)\s*(?:EUR)?",
        "transfer": r"(?i)Bonifico.*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:a|favore)\s+(.+)",
    },
    {
        "name": "BNL",
        "identifier": "bnl",
        "account_label": "BNL",
        "expense": r"(?i)(?:Pagamento|Prelievo|Addebito).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:presso|c/o)\s+(.+)",
        "income": r"(?i)Accredito.*?€?\s*([\d.,]+)\s*(?:EUR)?",
    },
    {
        "name": "UniCredit",
        "identifier": "unicredit",
        "account_label": "UniCredit",
        # Amount comes before "carta"/"c/o": "autorizzata op.Internet 60,40 EUR carta *1210 c/o PAYPAL *SHOP.IT"
        "expense": (
            r"(?i)(?:autorizzata|Addebito|Pagamento|Transazione)\s+(?:(?:op\.?\w*|pos)\s+)?"
            r"(\d+[.,]\d{2})\s*(?:EUR|€).*?(?:c/o|presso|at)\s+"
            r"(.+?)(?:\s+\d{6,}|\s+\d{2}/\d{2}/\d{2}|Per info|$)"
        ),
        "income": r"(?i)(?:Accredito|bonifico).*?€?\s*(\d+[.,]\d{2})\s*(?:EUR)?",
        "transfer": r"(?i)Bonifico.*?€?\s*(\d+[.,]\d{2})\s*(?:EUR)?.*?(?:verso|a)\s+(.+)",
    },
]

# SMS sources (identifier = sender fragment, matched by containment)
SMS_INSTITUTIONS = [
    {
        "name": "Revolut",
        "identifier": "REVOLUT",
        "account_label": "Revolut",
        "expense": r"(?i)(?:hai\s+speso|payment\s+of|spent).*?([\d.,]+)\s*€?.*?(?:at|presso|da|in)\s+(.+)",
        "income": r"(?i)(?:ricevuto|received).*?([\d.,]+)\s*€?.*?(?:from|da)\s+(.+)",
        "transfer": r"(?i)(?:trasferimento|transfer).*?([\d.,]+)\s*€?.*?(?:to|a|verso)\s+(.+)",
    },
    {
        "name": "PayPal",
        "identifier": "PayPal",
        "account_label": "PayPal",
        "expense": r"(?i)(?:sent|inviato|hai\s+inviato).*?([\d.,]+)\s*€?.*?(?:to|a)\s+(.+)",
        "income": r"(?i)(?:received|ricevuto|hai\s+ricevuto).*?([\d.,]+)\s*€?.*?(?:from|da)\s+(.+)",
    },
    {
        "name": "Postepay",
        "identifier": "POSTEPAY",
        "account_label": "Postepay",
        "expense": r"(?i)(?:pagamento|addebito).*?([\d.,]+)\s*€?.*?(?:presso|at)\s+(.+)",
        "income": r"(?i)(?:accredito|ricarica).*?([\d.,]+)\s*€?",
        "transfer": r"(?i)bonifico.*?([\d.,]+)\s*€?.*?(?:a|verso)\s+(.+)",
    },
    {
        "name": "BBVA",
        "identifier": "BBVA",
        "account_label": "BBVA",
        "expense": r"(?i)(?:compra|pago|cargo).*?([\d.,]+)\s*€?.*?(?:en|at)\s+(.+)",
        "income": r"(?i)(?:ingreso|abono).*?([\d.,]+)\s*€?",
        "transfer": r"(?i)transferencia.*?([\d.,]+)\s*€?.*?(?:a|para)\s+(.+)",
    },
    {
        "name": "Intesa Sanpaolo",
        "identifier": "INTESA",
        "account_label": "Intesa Sanpaolo",
        "expense": r"(?i)(?:addebito|pagamento)\s+carta.*?([\d.,]+)\s*€?.*?presso\s+(.+)",
        "income": r"(?i)accredito.*?([\d.,]+)\s*€?",
        "transfer": r"(?i)bonifico.*?([\d.,]+)\s*€?.*?(?:a|verso)\s+(.+)",
    },
    {
        "name": "UniCredit",
        "identifier": "UNICREDIT",
        "account_label": "UniCredit",
        "expense": r"(?i)(?:Addebito|Pagamento|autorizzata|Transazione).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:presso|at|c/o|carta.*?c/o)\s+(.+)",
        "income": r"(?i)(?:Accredito|bonifico).*?€?\s*([\d.,]+)\s*(?:EUR)?",
        "transfer": r"(?i)Bonifico.*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:verso|a)\s+(.+)",
    },
    {
        "name": "Mastercard",
        "identifier": "MASTERCARD",
        "account_label": "Carta Mastercard",
        "expense": r"(?i)(?:Autorizzazione|Spesa|Pagamento).*?€?\s*([\d.,]+)\s*(?:EUR)?.*?(?:presso|at)\s+(.+)",
    },
]

# Catch-all rules for SMS senders that resolve to no institution but look financial.
# name/account_label are replaced with the sender at extraction time.
GENERIC_SMS_INSTITUTION = {
    "name": "Generic",
    "identifier": "GENERIC",
    "account_label": "Account",
    "expense": r"(?i)(?:speso|pagato|addebito|autorizzata|transazione|purchase|sent|spent|payment).*?([\d.,]+)\s*€?.*?(?:presso|at|c/o|to|a)\s+(.+)",
    "income": r"(?i)(?:ricevuto|accredito|ricarica|received|credit).*?([\d.,]+)\s*€?.*?(?:da|from)\s*(.*)",
    "transfer": r"(?i)(?:bonifico|transfer).*?([\d.,]+)\s*€?",
}

# Sender fragments that mark an unknown SMS sender as financial
FINANCIAL_SENDER_KEYWORDS = [
    "BANK", "BANCA", "PAY", "CARD", "CARTA", "CREDIT", "DEBIT", "ALERT", "INFO", "CONTO",
    "POSTE", "HYPE", "N26", "REVOLUT", "CURVE", "WISE", "SATISPAY", "AMEX", "VISA",
    "MASTERCARD", "ING", "BNL", "BPER", "FINECO", "WEBANK", "WIDIBA", "ILLIMITY",
    "NEXI", "FINDOMESTIC", "COMPASS", "SANTANDER", "UBI", "CREDEM", "MEDIOLANUM",
]

# Body fragments that signal a money movement
MONEY_SIGNAL_KEYWORDS = [
    "€", "EUR", "SPESO", "PAGATO", "ADDEBITO", "ACCREDITO", "BONIFICO", "AUTHORIZED",
    "SPENT", "PURCHASE", "TRANSAZIONE", "TRANSACTION", "PAGAMENTO",
]

# Merchant-side keywords that suggest a transfer between the user's own accounts
BANK_ACCOUNT_KEYWORDS = [
    "revolut", "paypal", "postepay", "bbva", "unicredit", "intesa", "bnl",
    "poste", "banco", "banca", "conto", "carta", "prepagata",
    "coinbase", "binance", "crypto", "kraken", "nexo", "n26", "wise",
    "transferwise", "hype", "satispay", "tinaba", "yap", "buddybank",
    "credit agricole", "ing", "webank", "fineco", "widiba", "chebanca",
    "mediolanum", "monte paschi", "mps", "ubi", "bper", "carige",
]
