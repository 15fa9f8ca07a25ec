"""All prompt templates for job analysis, gap analysis, cover letter and email drafting.

The templates are in French: the letters and emails they produce are sent to
French-speaking recruiters.
"""

from __future__ import annotations

JOB_ANALYSIS_PROMPT = """Analyse l'offre d'emploi suivante. Ne te contente pas de résumer, cherche "l'entre-les-lignes".

Tu DOIS répondre avec un objet JSON :
{{
  "company_name": "...",
  "role": "...",
  "location": "...",
  "missions": ["...", "..."],
  "insights": "🚩 **Vigilance** : [Un risque ou contrainte cachée]\\n\\n💎 **Pépite** : [L'avantage unique ou tech sympa]\\n\\n⚡ **Le Vrai Job** : [La priorité réelle n°1 en 10 mots]",
  "tech_stack": ["..."],
  "daily_tasks_forecast": "• [Verbe d'action] tâche concrète (≈30% du temps)\\n• [Verbe d'action] tâche concrète (≈50% du temps)\\n• [Verbe d'action] tâche concrète (≈20% du temps)",
  "recruitment_process": "• Étape 1\\n• Étape 2\\n• Étape 3 (max 5 lignes, clair et concret)",
  "profile_requirements": ["Must-have 1", "Must-have 2", "Nice-to-have 1"],
  "company_summary": "1 phrase sur qui est l'entreprise et ce qu'elle fait (pas le poste)"
}}

CONSIGNES POUR "insights" :
- Utilise DEUX retours à la ligne (\\n\\n) entre chaque point pour le rendu Markdown.
- Sois critique : si l'offre est floue, mentionne-le.
- Ne dépasse pas 15 mots par point.
- Pas de blabla promotionnel.
- daily_tasks_forecast : 3 puces max, phrases ultra courtes, commence par un verbe d'action, indique une estimation (%) et NE répète pas les missions officielles ; c'est un forecast de ce que la personne fera vraiment au quotidien.
- recruitment_process : 3 à 5 étapes max, chaque étape en puce courte.
- profile_requirements : liste 3-6 bullet points, commence par **Must** ou **Nice** pour signaler la priorité.
- company_summary : 1 phrase neutre sur l'activité de l'entreprise (produit/secteur), ne pas mentionner le poste ni la localisation.

OFFRE :
{description}
"""

GAP_ANALYSIS_PROMPT = """Agis comme un recruteur technique. Compare le CV du candidat avec l'offre.
Sois **direct** et **synthétique**.

Offre :
{job_description}

CV : fourni dans le message système précédent (cacheable).
{preferences_block}
Tâche : Analyse le profil par rapport à l'offre{preferences_clause}.

CONSIGNES DE FORMATAGE (STRICT) :
- Utilise du Markdown standard.
- **IMPORTANT** : Ajoute une ligne vide entre CHAQUE point de liste (*) pour éviter les blocs de texte compacts.
- **IMPORTANT** : Ajoute une ligne vide avant chaque titre (###).
- Ne pas utiliser de phrases d'introduction ou de conclusion.

FORMAT ATTENDU :

### 🎯 Score de pertinence : [0-100]%

### ✅ Points Forts
* **[Compétence]** : [Preuve courte du CV]

* **[Expérience]** : [Preuve courte du CV]

### ⚠️ Gaps
* **[Manquant]** : [Raison factuelle]

* **[Différence]** : [Raison factuelle]

Règles : Max 3-4 points par section. Pas de remplissage.
"""

COVER_LETTER_PROMPT = """Rédige une lettre de motivation en français. Ton direct et factuel. Chaque phrase doit contenir une information concrète du CV.

FORMAT HTML :
Utilise uniquement <p>, <strong>, <br>, <ul>, <li>. Pas de style inline.
IMPORTANT : Chaque paragraphe distinct doit être dans sa propre balise <p>...</p>. Ne colle pas les paragraphes ensemble.

En-tête :
{full_name}<br>{email}<br>{phone}<br>{address}
<br><br>
À l'attention de [Extrais le nom de l'entreprise de l'offre, sinon utilise "l'entreprise"]
<br><br>
<strong>Objet : Candidature pour le poste de [Extrais le titre exact du poste de l'offre]</strong>
<br><br>
{city}, le {today}
<br><br>
------------------------------

CONTEXTE :
- CV complet : fourni dans le message système (utilise UNIQUEMENT les faits vérifiables)
- Offre : {job_description}
- Disponibilité : {availability_start}, {availability_duration}
{preferences_line}- Note du candidat (à appliquer strictement, même si cela implique d'ajuster le wording) : {user_context}

STRUCTURE :

Intro (1 paragraphe dans <p>) : "Monsieur/Madame, Étudiant à {school}, je candidate pour le poste de [titre poste] en stage. Je suis disponible dès {availability_start} pour une durée de {availability_duration}."

Phrase d'accroche (dans <p>) : <strong>Pourquoi mon profil apporte une valeur immédiate à [Entreprise] :</strong>

Corps (2-3 sections thématiques, chacune dans un <p> distinct) :
Pour chaque section, titre court en gras puis 2-3 phrases FACTUELLES. Identifie les dimensions clés de l'offre (culture/domaine, technique, produit/business).
Chaque thème = un paragraphe <p> séparé.

Chaque phrase doit contenir :
- Un projet/expérience spécifique du CV avec durée/contexte si mentionné
- Une technologie/outil/méthode précis utilisé
- Un résultat concret UNIQUEMENT s'il est explicitement dans le CV

CRITIQUE : N'INVENTE AUCUN CHIFFRE. Si le CV ne mentionne pas "80% d'amélioration" ou "200 clients", ne l'écris pas. Parle de ce qui a été fait, pas d'impact quantifié imaginaire.

Exemple AVEC métriques du CV : "Chez Everflow (4 ans), j'ai automatisé l'import Excel→ERP avec Zapier, réduisant le traitement de 3h à 20min."
Exemple SANS métriques inventées : "Chez Everflow (4 ans), j'ai conçu l'API mobile en React Native pour la gestion produit. J'ai automatisé l'import Excel→ERP avec Zapier et Make."

TEMPS ET FORMULATIONS :
- Utilise le passé composé pour les compétences acquises : "j'ai acquis", "j'ai développé"
- Évite les participes présents seuls : préfère "pour améliorer" à "améliorant", "afin de" à "permettant"

INTERDIT (phrases à ne JAMAIS écrire) :
❌ "compréhension approfondie", "dynamiques agiles", "valeur ajoutée"
❌ "Ma capacité à...", "Je suis capable de..."
❌ "compétences variées", "solides compétences"
❌ "candidat idéal", "parfaitement adapté", "directement applicable"
❌ "environnement en évolution", "sous pression"
❌ "j'ai eu l'opportunité de", "j'ai pu"
❌ Toute phrase qui ne contient pas un fait vérifiable du CV
❌ Toute référence au recruteur ("comme le vôtre", "que vous proposez")
❌ CHIFFRES ET MÉTRIQUES INVENTÉS (%, nombre de clients, durées, augmentations) qui ne sont PAS dans le CV

Ce qui est BON :
✓ Noms de projets, entreprises, produits
✓ Technologies et outils spécifiques
✓ Durées (ans, mois)
✓ Chiffres et métriques présents dans le CV
✓ Résultats mesurables présents dans le CV

Conclusion (dans <p>) : Une phrase directe et engageante. Exemples : "Je serais ravi d'échanger avec vous sur cette opportunité." ou "Rencontrons-nous pour en discuter."

Signature : <p>Cordialement,<br>{full_name}</p>

IMPÉRATIF : Si la note du candidat contient des informations pertinentes, intègre-les explicitement dans le corps. Reste concis : mieux vaut 2 paragraphes denses que 3 dilués. CHAQUE PARAGRAPHE doit être dans une balise <p> séparée pour assurer l'espacement visuel.

MODIFS À PRIORISER (si fournies dans la note du candidat) :
- Appliquer les demandes exactes (ton, points à insister/retirer).
- Si une demande contredit les règles, privilégier la demande du candidat.
"""

EMAIL_PROMPT = """Rédige un email de candidature court et direct pour accompagner un CV et une lettre de motivation.

Contexte :
- Offre : {job_description}
- Candidat : {full_name}, {city}
{preferences_line}- Note du candidat : {note}

Structure :

OBJET : Court et précis (ex: "Candidature stage [Poste] - {full_name}")

CORPS (50-80 mots max, 2-3 phrases) :
- Salutation (Bonjour / Madame, Monsieur)
- 1 phrase : Je candidate pour [poste]. [1 teaser court - une expérience/compétence clé du CV pertinente pour l'offre].
- 1 phrase : Vous trouverez mon CV et ma lettre de motivation en pièces jointes.
- Formule de politesse courte (Cordialement, Bien cordialement)

Ton : Direct et factuel. PAS de "Je suis..." ou "Je me présente". Le teaser doit être concret (ex: "Mon expérience de 4 ans chez X en tant que Y" ou "J'ai développé Z avec [stack]").

Format : Texte brut, pas de HTML.
"""

NO_NOTE = "Aucune note"

_FRENCH_MONTHS = (
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
)


def french_long_date(value) -> str:
    """Format a date as ``19 octobre 2026``."""
    return f"{value.day} {_FRENCH_MONTHS[value.month - 1]} {value.year}"


def build_job_analysis_prompt(description: str) -> str:
    return JOB_ANALYSIS_PROMPT.format(description=description)


def build_gap_analysis_prompt(job_description: str, bio_preferences: str | None = None) -> str:
    preferences_block = ""
    preferences_clause = ""
    if bio_preferences:
        preferences_block = (
            "\nContexte additionnel du candidat (objectifs, préférences de stage) :\n"
            f"{bio_preferences}\n"
        )
        preferences_clause = " en tenant compte de ses objectifs et de ses préférences"
    return GAP_ANALYSIS_PROMPT.format(
        job_description=job_description,
        preferences_block=preferences_block,
        preferences_clause=preferences_clause,
    )


def build_cover_letter_prompt(
    *,
    job_description: str,
    full_name: str,
    email: str,
    city: str,
    school: str,
    availability_start: str,
    availability_duration: str,
    today: str,
    phone: str = "",
    address: str = "",
    bio_preferences: str | None = None,
    user_context: str | None = None,
) -> str:
    preferences_line = f"- Parcours et objectifs du candidat : {bio_preferences}\n" if bio_preferences else ""
    context = user_context.strip() if user_context and user_context.strip() else NO_NOTE
    return COVER_LETTER_PROMPT.format(
        job_description=job_description,
        full_name=full_name,
        email=email,
        phone=phone or "",
        address=address or city,
        city=city,
        school=school,
        availability_start=availability_start,
        availability_duration=availability_duration,
        today=today,
        preferences_line=preferences_line,
        user_context=context,
    )


def build_email_prompt(
    *,
    job_description: str,
    full_name: str,
    city: str,
    bio_preferences: str | None = None,
    note: str | None = None,
) -> str:
    preferences_line = f"- Parcours et objectifs : {bio_preferences}\n" if bio_preferences else ""
    return EMAIL_PROMPT.format(
        job_description=job_description,
        full_name=full_name,
        city=city,
        preferences_line=preferences_line,
        note=note.strip() if note and note.strip() else NO_NOTE,
    )
