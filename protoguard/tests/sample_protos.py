# Importable members referenced by definition documents in the tests.

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€"}


def new_account(owner, balance=0):
    return {"owner": owner, "balance": balance}


def deposit(self, amount):
    self.set("balance", self.fields["balance"] + amount)
    return self.fields["balance"]


def describe(self):
    return f"{self.fields['owner']}: {self.fields['balance']}"


class Ledger:
    @staticmethod
    def open(owner):
        return {"owner": owner, "balance": 0}
