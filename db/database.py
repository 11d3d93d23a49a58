# db/database.py

from supabase import create_client, Client
import streamlit as st


def get_supabase_client() -> Client:
    """
    Returns a Supabase client cached in the browser session.
    Sign-in stores the user's auth session on this client.
    """

    if "supabase_client" not in st.session_state:
        url = st.secrets["supabase"]["url"]
        key = st.secrets["supabase"].get("anon_key") or st.secrets["supabase"]["service_key"]
        st.session_state.supabase_client = create_client(url, key)

    return st.session_state.supabase_client
